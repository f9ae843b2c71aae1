from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator

from algorithms.blood_compatibility import BLOOD_TYPE_CHOICES

PERCENTAGE_VALIDATORS = [MinValueValidator(0), MaxValueValidator(100)]

ORGAN_TYPE_CHOICES = [
    ('kidney', 'Kidney'),
    ('liver', 'Liver'),
    ('heart', 'Heart'),
    ('lung', 'Lung'),
    ('pancreas', 'Pancreas'),
    ('kidney_pancreas', 'Kidney-Pancreas'),
    ('intestine', 'Intestine'),
]


class PatientQuerySet(models.QuerySet):
    def waitlisted_for(self, organ_type):
        """Active waitlist candidates for one organ type, in listing order"""
        return self.filter(
            waitlist_status='active',
            organ_needed=organ_type,
        ).order_by('created_at', 'id')


# ---------------------------
# Waitlisted Patient
# ---------------------------
class Patient(models.Model):
    WAITLIST_STATUS_CHOICES = [
        ('active', 'Active'),
        ('inactive', 'Inactive (temporarily on hold)'),
        ('transplanted', 'Transplanted'),
        ('removed', 'Removed'),
        ('deceased', 'Deceased'),
    ]

    URGENCY_CHOICES = [
        ('critical', 'Critical'),
        ('high', 'High'),
        ('medium', 'Medium'),
        ('low', 'Low'),
    ]

    patient_id = models.CharField(max_length=50, unique=True, help_text="Medical record number")
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    date_of_birth = models.DateField(null=True, blank=True)

    blood_type = models.CharField(max_length=4, choices=BLOOD_TYPE_CHOICES, blank=True)
    organ_needed = models.CharField(max_length=20, choices=ORGAN_TYPE_CHOICES, db_index=True)
    medical_urgency = models.CharField(max_length=10, choices=URGENCY_CHOICES, default='medium')
    waitlist_status = models.CharField(
        max_length=15, choices=WAITLIST_STATUS_CHOICES, default='active', db_index=True
    )
    date_added_to_waitlist = models.DateField(null=True, blank=True)

    # Externally computed (0-100), opaque to the matching engine
    priority_score = models.FloatField(default=0, validators=PERCENTAGE_VALIDATORS)

    # Immunology
    hla_typing = models.CharField(max_length=255, blank=True)
    pra_percentage = models.FloatField(null=True, blank=True, validators=PERCENTAGE_VALIDATORS)
    cpra_percentage = models.FloatField(null=True, blank=True, validators=PERCENTAGE_VALIDATORS)

    # Clinical
    weight_kg = models.FloatField(null=True, blank=True)
    height_cm = models.FloatField(null=True, blank=True)
    previous_transplants = models.PositiveIntegerField(default=0)
    comorbidity_score = models.PositiveIntegerField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PatientQuerySet.as_manager()

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    def __str__(self):
        return f"{self.full_name} ({self.patient_id}, {self.organ_needed})"

    class Meta:
        ordering = ['created_at']
        verbose_name = "Patient"
        verbose_name_plural = "Patients"
        indexes = [
            models.Index(fields=['waitlist_status', 'organ_needed']),
        ]
