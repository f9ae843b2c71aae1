from django.contrib import admin
from .models import Patient


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ['patient_id', 'full_name', 'blood_type', 'organ_needed', 'waitlist_status',
                    'priority_score', 'cpra_percentage']
    list_filter = ['organ_needed', 'waitlist_status', 'blood_type']
    search_fields = ['patient_id', 'first_name', 'last_name']
    ordering = ['-priority_score']

    fieldsets = (
        ('Identity', {
            'fields': ('patient_id', 'first_name', 'last_name', 'date_of_birth')
        }),
        ('Waitlist', {
            'fields': ('organ_needed', 'waitlist_status', 'medical_urgency',
                       'date_added_to_waitlist', 'priority_score')
        }),
        ('Immunology', {
            'fields': ('blood_type', 'hla_typing', 'pra_percentage', 'cpra_percentage')
        }),
        ('Clinical', {
            'fields': ('weight_kg', 'height_cm', 'previous_transplants', 'comorbidity_score'),
            'classes': ('collapse',),
        }),
    )
