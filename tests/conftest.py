"""
Shared fixtures for the OrganLink test suite.
"""
import itertools
from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from organlink.celery import app as celery_app

PASSWORD = 'S3cure-pass!'

_mrn = itertools.count(1)


@pytest.fixture(autouse=True)
def eager_celery(settings):
    """Run Celery tasks inline. Celery reads the CELERY_ settings live from Django."""
    settings.CELERY_TASK_ALWAYS_EAGER = True
    return celery_app


@pytest.fixture
def today():
    return timezone.localdate()


@pytest.fixture
def make_user(db, django_user_model):
    def _make_user(username, role='user', **extra):
        return django_user_model.objects.create_user(
            username=username,
            email=extra.pop('email', f"{username}@hospital.test"),
            password=PASSWORD,
            role=role,
            **extra,
        )
    return _make_user


@pytest.fixture
def coordinator(make_user):
    return make_user('coordinator', role='user')


@pytest.fixture
def admins(make_user):
    return [make_user('admin1', role='admin'), make_user('admin2', role='admin')]


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def auth_client(api_client, coordinator):
    api_client.force_authenticate(user=coordinator)
    return api_client


@pytest.fixture
def make_patient(db, today):
    from patients.models import Patient

    def _make_patient(**overrides):
        fields = {
            'patient_id': f"MRN-{next(_mrn):05d}",
            'first_name': 'Test',
            'last_name': 'Patient',
            'blood_type': 'A+',
            'organ_needed': 'kidney',
            'waitlist_status': 'active',
            'priority_score': 50,
            'date_added_to_waitlist': today - timedelta(days=180),
        }
        fields.update(overrides)
        return Patient.objects.create(**fields)
    return _make_patient


@pytest.fixture
def donor_organ(db):
    from organs.models import DonorOrgan

    return DonorOrgan.objects.create(
        donor_id='DN-1001',
        organ_type='kidney',
        blood_type='O-',
        hla_typing='A1, A2, B7, B8, DR3, DR4, DQ2',
        donor_age=40,
        donor_weight_kg=70,
        organ_quality='good',
    )
