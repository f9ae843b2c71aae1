# api/serializers.py

from rest_framework import serializers

from algorithms.blood_compatibility import BLOOD_TYPE_CHOICES
from organs.models import DonorOrgan, Match
from patients.models import ORGAN_TYPE_CHOICES


class DonorOrganSerializer(serializers.ModelSerializer):
    is_hypothetical = serializers.BooleanField(read_only=True)

    class Meta:
        model = DonorOrgan
        fields = [
            'id',
            'donor_id',
            'organ_type',
            'blood_type',
            'hla_typing',
            'donor_age',
            'donor_weight_kg',
            'donor_height_cm',
            'organ_quality',
            'cause_of_death',
            'cold_ischemia_time_hours',
            'recovery_hospital',
            'status',
            'allocated_to_patient',
            'is_hypothetical',
            'created_at',
            'updated_at',
        ]


class HypotheticalDonorSerializer(serializers.Serializer):
    """
    Input (and echo) of a what-if donor for simulation runs
    """
    id = serializers.CharField(read_only=True)
    donor_id = serializers.CharField(max_length=50, required=False, default='SIMULATED')
    organ_type = serializers.ChoiceField(choices=ORGAN_TYPE_CHOICES)
    blood_type = serializers.ChoiceField(choices=BLOOD_TYPE_CHOICES)
    hla_typing = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    donor_age = serializers.IntegerField(min_value=0, max_value=120, required=False, allow_null=True, default=None)
    donor_weight_kg = serializers.FloatField(min_value=0, required=False, allow_null=True, default=None)
    donor_height_cm = serializers.FloatField(min_value=0, required=False, allow_null=True, default=None)
    organ_quality = serializers.ChoiceField(
        choices=DonorOrgan.QUALITY_CHOICES, required=False, allow_blank=True, default=''
    )
    is_hypothetical = serializers.BooleanField(read_only=True)


class MatchRequestSerializer(serializers.Serializer):
    donor_organ_id = serializers.IntegerField(min_value=1, required=False)
    donor_code = serializers.CharField(max_length=50, required=False)
    simulation_mode = serializers.BooleanField(required=False, default=False)
    hypothetical_donor = HypotheticalDonorSerializer(required=False)

    def validate(self, attrs):
        sources = [
            attrs.get('donor_organ_id') is not None,
            bool(attrs.get('donor_code')),
            attrs.get('hypothetical_donor') is not None,
        ]

        if sum(sources) != 1:
            raise serializers.ValidationError(
                "Provide exactly one of donor_organ_id, donor_code or hypothetical_donor."
            )
        if sources[2] and not attrs.get('simulation_mode'):
            raise serializers.ValidationError(
                "hypothetical_donor requires simulation_mode=true."
            )
        return attrs



class MatchResultSerializer(serializers.Serializer):
    """
    Flattened view of an in-memory match result, including candidate details
    """
    patient_id = serializers.IntegerField(source='patient.id')
    patient_name = serializers.CharField(source='patient.full_name')
    patient_id_mrn = serializers.CharField(source='patient.patient_id')
    blood_type = serializers.CharField(source='patient.blood_type')
    organ_needed = serializers.CharField(source='patient.organ_needed')
    priority_score = serializers.FloatField(source='patient.priority_score')
    medical_urgency = serializers.CharField(source='patient.medical_urgency')

    compatibility_score = serializers.FloatField()
    blood_type_compatible = serializers.BooleanField()
    abo_compatible = serializers.BooleanField()
    hla_match_score = serializers.FloatField()
    hla_matches = serializers.DictField(child=serializers.IntegerField())
    total_hla_matches = serializers.IntegerField()
    hla_typed = serializers.BooleanField()
    size_compatible = serializers.BooleanField()
    virtual_crossmatch = serializers.CharField()
    predicted_graft_survival = serializers.FloatField()
    priority_rank = serializers.IntegerField()
    days_on_waitlist = serializers.IntegerField()


class MatchSerializer(serializers.ModelSerializer):
    """
    Persisted match with donor code for list views
    """
    donor_code = serializers.CharField(source='donor_organ.donor_id', read_only=True)
    total_hla_matches = serializers.IntegerField(read_only=True)

    class Meta:
        model = Match
        fields = [
            'id',
            'donor_organ',
            'donor_code',
            'patient',
            'patient_name',
            'compatibility_score',
            'blood_type_compatible',
            'abo_compatible',
            'hla_match_score',
            'hla_a_match',
            'hla_b_match',
            'hla_dr_match',
            'hla_dq_match',
            'total_hla_matches',
            'size_compatible',
            'virtual_crossmatch_result',
            'physical_crossmatch_result',
            'predicted_graft_survival',
            'match_status',
            'contacted_date',
            'response_date',
            'priority_rank',
            'admin_override',
            'override_reason',
            'created_at',
        ]
        read_only_fields = fields


class MatchOverrideSerializer(serializers.Serializer):
    priority_rank = serializers.IntegerField(min_value=1)
    override_reason = serializers.CharField(max_length=2000, allow_blank=False, trim_whitespace=True)


class MatchStatusSerializer(serializers.Serializer):
    match_status = serializers.ChoiceField(choices=['contacted', 'accepted', 'declined'])
