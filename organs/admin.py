# organs/admin.py
from django.contrib import admin
from django.utils.html import format_html

from .models import DonorOrgan, Match, Notification, AuditLog


@admin.register(DonorOrgan)
class DonorOrganAdmin(admin.ModelAdmin):
    list_display = ['donor_id', 'organ_type', 'blood_type', 'organ_quality', 'status', 'match_count']
    list_filter = ['organ_type', 'blood_type', 'status', 'organ_quality']
    search_fields = ['donor_id', 'recovery_hospital']
    readonly_fields = ['created_at', 'updated_at']

    fieldsets = (
        ('Organ', {
            'fields': ('donor_id', 'organ_type', 'organ_quality', 'status', 'allocated_to_patient',
                       'recovery_hospital')
        }),
        ('Immunology', {
            'fields': ('blood_type', 'hla_typing')
        }),
        ('Donor', {
            'fields': ('donor_age', 'donor_weight_kg', 'donor_height_cm', 'cause_of_death',
                       'cold_ischemia_time_hours')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    @admin.display(description='Matches')
    def match_count(self, obj):
        return obj.matches.count()


@admin.register(Match)
class MatchAdmin(admin.ModelAdmin):
    list_display = ['priority_rank', 'patient_name', 'donor_organ', 'score_display', 'hla_display',
                    'virtual_crossmatch_result', 'predicted_graft_survival', 'match_status',
                    'admin_override']
    list_filter = ['match_status', 'virtual_crossmatch_result', 'admin_override']
    search_fields = ['patient_name', 'donor_organ__donor_id']
    ordering = ['donor_organ', 'priority_rank']
    readonly_fields = ['compatibility_score', 'hla_match_score', 'hla_a_match', 'hla_b_match',
                       'hla_dr_match', 'hla_dq_match', 'predicted_graft_survival', 'created_by',
                       'contacted_date', 'response_date', 'created_at', 'updated_at']

    @admin.display(description='Compatibility', ordering='compatibility_score')
    def score_display(self, obj):
        color = 'green' if obj.compatibility_score >= 70 else 'orange' if obj.compatibility_score >= 50 else 'gray'
        return format_html('<strong style="color: {};">{}%</strong>', color, round(obj.compatibility_score))

    @admin.display(description='HLA (A/B/DR, DQ)')
    def hla_display(self, obj):
        return f"{obj.hla_a_match}/{obj.hla_b_match}/{obj.hla_dr_match}, DQ {obj.hla_dq_match}"


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ['title', 'recipient_email', 'priority_level', 'related_patient_name', 'is_read',
                    'delivered_at', 'created_at']
    list_filter = ['priority_level', 'is_read', 'notification_type']
    search_fields = ['recipient_email', 'related_patient_name']
    readonly_fields = ['created_at', 'delivered_at']


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ['created_at', 'action', 'entity_type', 'entity_id', 'user_email', 'user_role']
    list_filter = ['action', 'entity_type']
    search_fields = ['entity_id', 'user_email', 'details']

    # Audit entries are append-only
    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
