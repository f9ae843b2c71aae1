from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator

from algorithms.blood_compatibility import BLOOD_TYPE_CHOICES
from patients.models import ORGAN_TYPE_CHOICES


# ---------------------------
# Donor Organ
# ---------------------------
class DonorOrgan(models.Model):
    QUALITY_CHOICES = [
        ('excellent', 'Excellent'),
        ('good', 'Good'),
        ('fair', 'Fair'),
        ('marginal', 'Marginal'),
    ]

    STATUS_CHOICES = [
        ('available', 'Available'),
        ('allocated', 'Allocated'),
        ('transplanted', 'Transplanted'),
        ('discarded', 'Discarded'),
    ]

    donor_id = models.CharField(max_length=50, unique=True)
    organ_type = models.CharField(max_length=20, choices=ORGAN_TYPE_CHOICES)
    blood_type = models.CharField(max_length=4, choices=BLOOD_TYPE_CHOICES)
    hla_typing = models.CharField(max_length=255, blank=True)

    donor_age = models.PositiveIntegerField(null=True, blank=True)
    donor_weight_kg = models.FloatField(null=True, blank=True)
    donor_height_cm = models.FloatField(null=True, blank=True)
    organ_quality = models.CharField(max_length=10, choices=QUALITY_CHOICES, blank=True)

    # Recorded for the allocation team, not scored
    cause_of_death = models.CharField(max_length=200, blank=True)
    cold_ischemia_time_hours = models.FloatField(null=True, blank=True)
    recovery_hospital = models.CharField(max_length=200, blank=True)
    status = models.CharField(max_length=15, choices=STATUS_CHOICES, default='available')
    allocated_to_patient = models.ForeignKey(
        'patients.Patient', on_delete=models.SET_NULL, null=True, blank=True, related_name='allocated_organs'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    is_hypothetical = False

    def __str__(self):
        return f"{self.donor_id} - {self.get_organ_type_display()} ({self.blood_type})"

    class Meta:
        ordering = ['-created_at']
        verbose_name = "Donor Organ"
        verbose_name_plural = "Donor Organs"


# ---------------------------
# Persisted Match
# ---------------------------
class Match(models.Model):
    STATUS_CHOICES = [
        ('potential', 'Potential'),
        ('contacted', 'Contacted'),
        ('accepted', 'Accepted'),
        ('declined', 'Declined'),
        ('transplanted', 'Transplanted'),
    ]

    CROSSMATCH_CHOICES = [
        ('negative', 'Negative'),
        ('positive', 'Positive'),
        ('pending', 'Pending'),
    ]

    PHYSICAL_CROSSMATCH_CHOICES = CROSSMATCH_CHOICES + [
        ('not_performed', 'Not Performed'),
    ]

    donor_organ = models.ForeignKey(DonorOrgan, on_delete=models.CASCADE, related_name='matches')
    patient = models.ForeignKey('patients.Patient', on_delete=models.CASCADE, related_name='matches')
    patient_name = models.CharField(max_length=200)

    compatibility_score = models.FloatField(validators=[MinValueValidator(0), MaxValueValidator(100)])
    blood_type_compatible = models.BooleanField(default=True)
    abo_compatible = models.BooleanField(default=True)
    hla_match_score = models.FloatField()
    hla_a_match = models.PositiveSmallIntegerField(default=0)
    hla_b_match = models.PositiveSmallIntegerField(default=0)
    hla_dr_match = models.PositiveSmallIntegerField(default=0)
    hla_dq_match = models.PositiveSmallIntegerField(default=0)
    size_compatible = models.BooleanField(default=True)
    virtual_crossmatch_result = models.CharField(max_length=10, choices=CROSSMATCH_CHOICES)
    physical_crossmatch_result = models.CharField(
        max_length=15, choices=PHYSICAL_CROSSMATCH_CHOICES, default='not_performed'
    )
    predicted_graft_survival = models.FloatField()

    match_status = models.CharField(max_length=15, choices=STATUS_CHOICES, default='potential')
    contacted_date = models.DateField(null=True, blank=True)
    response_date = models.DateField(null=True, blank=True)
    priority_rank = models.PositiveIntegerField()

    # Human override of the computed rank
    admin_override = models.BooleanField(default=False)
    override_reason = models.TextField(blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='created_matches'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def total_hla_matches(self):
        return self.hla_a_match + self.hla_b_match + self.hla_dr_match

    def __str__(self):
        return f"#{self.priority_rank} {self.patient_name} ← {self.donor_organ.donor_id} ({self.compatibility_score:.0f}%)"

    class Meta:
        ordering = ['donor_organ', 'priority_rank']
        verbose_name_plural = "Matches"
        indexes = [
            models.Index(fields=['donor_organ', 'priority_rank']),
            models.Index(fields=['match_status']),
        ]


# ---------------------------
# In-app Notification
# ---------------------------
class Notification(models.Model):
    PRIORITY_CHOICES = [
        ('critical', 'Critical'),
        ('high', 'High'),
        ('normal', 'Normal'),
    ]

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='notifications'
    )
    recipient_email = models.EmailField(blank=True)
    title = models.CharField(max_length=200)
    message = models.TextField(blank=True)
    notification_type = models.CharField(max_length=30, default='donor_match')
    priority_level = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='normal')
    related_patient = models.ForeignKey(
        'patients.Patient', on_delete=models.SET_NULL, null=True, blank=True, related_name='notifications'
    )
    related_patient_name = models.CharField(max_length=200, blank=True)
    action_url = models.CharField(max_length=255, blank=True)
    metadata = models.JSONField(default=dict, blank=True)

    is_read = models.BooleanField(default=False)
    delivered_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"[{self.priority_level}] {self.title} → {self.recipient_email or self.recipient_id}"

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['recipient', 'is_read']),
        ]


# ---------------------------
# Audit Log
# ---------------------------
class AuditLog(models.Model):
    ACTION_CHOICES = [
        ('create', 'Create'),
        ('update', 'Update'),
        ('delete', 'Delete'),
    ]

    action = models.CharField(max_length=10, choices=ACTION_CHOICES)
    entity_type = models.CharField(max_length=50)
    entity_id = models.CharField(max_length=50)
    patient_name = models.CharField(max_length=200, blank=True)
    details = models.TextField(blank=True)
    user_email = models.EmailField(blank=True)
    user_role = models.CharField(max_length=10, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.action} {self.entity_type}#{self.entity_id} by {self.user_email}"

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['entity_type', 'entity_id']),
        ]
