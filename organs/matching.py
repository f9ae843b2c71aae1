# organs/matching.py
"""
Donor-recipient matching orchestration.

Evaluates one donor organ (stored or hypothetical) against every active
waitlist candidate for the same organ, ranks the survivors and, outside
simulation mode, records the top matches, alerts admins about the best ones
and writes an audit entry. All writes of one run commit or roll back together.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework.exceptions import NotAuthenticated

from algorithms.compatibility import MatchResult, evaluate_candidate
from algorithms.hla import MAX_SCORED_MATCHES, parse_hla_typing
from algorithms.ranking import rank_matches, top_matches
from organs.models import AuditLog, DonorOrgan, Match, Notification
from patients.models import Patient

logger = logging.getLogger(__name__)

SIMULATION_DONOR_ID = 'simulation'

DEFAULT_MATCHING = {
    'PERSIST_LIMIT': 10,
    'NOTIFY_LIMIT': 3,
    'CANDIDATE_CHUNK_SIZE': 500,
}


def matching_setting(name):
    return getattr(settings, 'MATCHING', {}).get(name, DEFAULT_MATCHING[name])


@dataclass(frozen=True)
class HypotheticalDonor:
    """A what-if donor for simulation runs. Never persisted."""
    organ_type: str
    blood_type: str
    hla_typing: str = ''
    donor_id: str = 'SIMULATED'
    donor_age: Optional[int] = None
    donor_weight_kg: Optional[float] = None
    donor_height_cm: Optional[float] = None
    organ_quality: str = ''

    id = SIMULATION_DONOR_ID
    is_hypothetical = True


Donor = Union[DonorOrgan, HypotheticalDonor]


@dataclass
class MatchingRun:
    donor: Donor
    matches: List[MatchResult] = field(default_factory=list)
    simulation_mode: bool = False
    matches_created: int = 0

    @property
    def total_matches(self):
        return len(self.matches)


def get_donor_organ(donor_organ_id=None, donor_code=None):
    """Look a stored donor organ up by primary key, or by donor code when one is given (404 if absent)"""
    if donor_code:
        return get_object_or_404(DonorOrgan, donor_id=donor_code)
    if donor_organ_id is None:
        raise ValueError("A donor organ id or donor code is required")
    return get_object_or_404(DonorOrgan, pk=donor_organ_id)


def evaluate_donor(donor, today=None):
    """
    Score every active candidate waiting for this organ type and rank them.
    Read-only; the candidate pool is streamed in chunks.
    """
    today = today or timezone.localdate()
    donor_hla = parse_hla_typing(donor.hla_typing)

    candidates = Patient.objects.waitlisted_for(donor.organ_type)
    evaluated = 0
    results = []
    for patient in candidates.iterator(chunk_size=matching_setting('CANDIDATE_CHUNK_SIZE')):
        evaluated += 1
        result = evaluate_candidate(donor, patient, today=today, donor_hla=donor_hla)
        if result is not None:
            results.append(result)

    ranked = rank_matches(results)
    logger.info(
        f"Donor {donor.donor_id} ({donor.organ_type}, {donor.blood_type}): "
        f"{len(ranked)} of {evaluated} candidates compatible"
    )
    return ranked


def run_matching(user, donor_organ_id=None, simulation_mode=False, hypothetical_donor=None, today=None,
                 donor_code=None):
    """
    Entry point of the matching engine.

    Args:
        user: authenticated principal requesting the run
        donor_organ_id: primary key of a stored donor organ
        simulation_mode: when True nothing is written
        hypothetical_donor: HypotheticalDonor, only allowed in simulation mode
        today: reference date for tenure and age terms
        donor_code: donor code of a stored donor organ, used instead of donor_organ_id

    Returns:
        MatchingRun
    """
    if user is None or not user.is_authenticated:
        raise NotAuthenticated("Authentication required")

    if hypothetical_donor is not None:
        if not simulation_mode:
            raise ValueError("A hypothetical donor can only be matched in simulation mode")
        donor = hypothetical_donor
    else:
        donor = get_donor_organ(donor_organ_id, donor_code)

    ranked = evaluate_donor(donor, today=today)

    if simulation_mode:
        logger.info(f"Simulation run by {user.email} for donor {donor.donor_id}: {len(ranked)} matches, nothing persisted")
        return MatchingRun(donor=donor, matches=ranked, simulation_mode=True)

    created = persist_match_run(donor, ranked, user)
    return MatchingRun(donor=donor, matches=ranked, simulation_mode=False, matches_created=len(created))


def persist_match_run(donor, ranked, user):
    """
    Save the top matches, notify admins about the best ones and audit the run,
    as one transaction.

    Returns:
        List of created Match rows
    """
    with transaction.atomic():
        created = [
            create_match_record(donor, result, user)
            for result in top_matches(ranked, matching_setting('PERSIST_LIMIT'))
        ]
        notifications = create_match_notifications(
            donor, top_matches(ranked, matching_setting('NOTIFY_LIMIT'))
        )
        write_matching_audit(donor, ranked, user)

    logger.info(
        f"Donor {donor.donor_id}: {len(created)} matches saved, "
        f"{len(notifications)} admin notifications created"
    )
    return created


def create_match_record(donor, result, user):
    patient = result.patient
    return Match.objects.create(
        donor_organ=donor,
        patient=patient,
        patient_name=patient.full_name,
        compatibility_score=result.compatibility_score,
        blood_type_compatible=result.blood_type_compatible,
        abo_compatible=result.abo_compatible,
        hla_match_score=result.hla_match_score,
        hla_a_match=result.hla_matches['A'],
        hla_b_match=result.hla_matches['B'],
        hla_dr_match=result.hla_matches['DR'],
        hla_dq_match=result.hla_matches['DQ'],
        size_compatible=result.size_compatible,
        virtual_crossmatch_result=result.virtual_crossmatch,
        predicted_graft_survival=result.predicted_graft_survival,
        match_status='potential',
        priority_rank=result.priority_rank,
        created_by=user,
    )


def create_match_notifications(donor, results):
    """One notification per active admin for each of the given top results"""
    if not results:
        return []

    User = get_user_model()
    admins = list(User.objects.filter(role='admin', is_active=True))
    if not admins:
        logger.warning(f"No active admin users to notify for donor {donor.donor_id}")
        return []

    notifications = []
    for result in results:
        patient = result.patient
        for admin in admins:
            notifications.append(Notification.objects.create(
                recipient=admin,
                recipient_email=admin.email,
                title='High-Compatibility Donor Match',
                message=(
                    f"Excellent match: {patient.full_name} "
                    f"({result.compatibility_score:.0f}% compatible, "
                    f"{result.total_hla_matches}/{MAX_SCORED_MATCHES} HLA matches) "
                    f"for {donor.organ_type} from donor {donor.donor_id}"
                ),
                notification_type='donor_match',
                priority_level='critical' if result.priority_rank == 1 else 'high',
                related_patient=patient,
                related_patient_name=patient.full_name,
                action_url=f"/api/matches/?donor_organ={donor.id}",
                metadata={
                    'donor_id': donor.id,
                    'patient_id': patient.id,
                    'compatibility_score': round(result.compatibility_score, 1),
                    'hla_matches': result.total_hla_matches,
                    'priority_rank': result.priority_rank,
                },
            ))
    return notifications


def write_matching_audit(donor, ranked, user):
    if ranked:
        top = ranked[0]
        summary = (
            f"Top match: {top.compatibility_score:.0f}% "
            f"({top.total_hla_matches}/{MAX_SCORED_MATCHES} HLA)"
        )
    else:
        summary = "No compatible recipients"

    return AuditLog.objects.create(
        action='create',
        entity_type='DonorOrgan',
        entity_id=str(donor.id),
        details=f"Matching for donor {donor.donor_id}: {len(ranked)} compatible recipients found. {summary}",
        user_email=user.email,
        user_role=getattr(user, 'role', ''),
    )


def override_match_rank(match, new_rank, reason, user):
    """
    Manually re-rank a persisted match. The computed rank is advisory; the
    transplant team has the final word, and every override is audited.
    """
    reason = (reason or '').strip()
    if not reason:
        raise ValueError("An override reason is required")
    if new_rank < 1:
        raise ValueError("Priority rank must be 1 or greater")

    old_rank = match.priority_rank
    with transaction.atomic():
        match.priority_rank = new_rank
        match.admin_override = True
        match.override_reason = reason
        match.save(update_fields=['priority_rank', 'admin_override', 'override_reason', 'updated_at'])

        AuditLog.objects.create(
            action='update',
            entity_type='Match',
            entity_id=str(match.id),
            patient_name=match.patient_name,
            details=f"Admin override: Match priority changed from rank {old_rank} to {new_rank}. Reason: {reason}",
            user_email=user.email,
            user_role=getattr(user, 'role', ''),
        )

    logger.info(f"Match {match.id} re-ranked {old_rank} -> {new_rank} by {user.email}")
    return match


STATUS_TRANSITIONS = {
    'potential': ('contacted', 'accepted', 'declined'),
    'contacted': ('accepted', 'declined'),
}


def update_match_status(match, new_status, user, today=None):
    """
    Move a persisted match through the allocation workflow.

    potential -> contacted -> accepted / declined. Accepting allocates the
    donor organ to the match's patient and notifies the requesting user.
    The status change, the allocation and the audit entry commit together.
    """
    old_status = match.match_status
    if new_status not in STATUS_TRANSITIONS.get(old_status, ()):
        raise ValueError(f"Cannot change match status from {old_status} to {new_status}")

    donor = match.donor_organ
    if new_status == 'accepted' and donor.status != 'available':
        raise ValueError(f"Donor organ {donor.donor_id} is already {donor.status}")

    today = today or timezone.localdate()
    with transaction.atomic():
        match.match_status = new_status
        if new_status == 'contacted':
            match.contacted_date = today
        match.response_date = today
        match.save(update_fields=['match_status', 'contacted_date', 'response_date', 'updated_at'])

        if new_status == 'accepted':
            donor.status = 'allocated'
            donor.allocated_to_patient = match.patient
            donor.save(update_fields=['status', 'allocated_to_patient', 'updated_at'])

            Notification.objects.create(
                recipient=user,
                recipient_email=user.email,
                title='Match Accepted',
                message=f"Donor {donor.donor_id} has been allocated to {match.patient_name}",
                notification_type='donor_match',
                priority_level='high',
                related_patient=match.patient,
                related_patient_name=match.patient_name,
                action_url=f"/api/matches/{match.id}/",
            )

        AuditLog.objects.create(
            action='update',
            entity_type='Match',
            entity_id=str(match.id),
            patient_name=match.patient_name,
            details=f"Match status changed from {old_status} to {new_status} for donor {donor.donor_id}",
            user_email=user.email,
            user_role=getattr(user, 'role', ''),
        )

    logger.info(f"Match {match.id} {old_status} -> {new_status} by {user.email}")
    return match
