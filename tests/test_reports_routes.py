"""
Tests for Report and Dashboard API Endpoints
"""
from datetime import datetime

import pytest

from conftest import auth_headers_for
from schemas.user import Role
from utils.timeutil import utc_now


@pytest.fixture
def june_scenario(make_user, make_file):
    alice = make_user('alice', department='HR')
    bob = make_user('bob', department='Engineering')
    carol = make_user('carol', department='Engineering')
    make_file(alice, 'Tax Forms', datetime(2025, 6, 15))
    make_file(carol, 'Tax Forms', datetime(2025, 3, 1))
    return alice, bob, carol


class TestComplianceReport:
    """Test compliance report endpoint"""

    def test_requires_admin(self, client, employee_headers):
        response = client.get('/api/reports/compliance', headers=employee_headers)
        assert response.status_code == 403
        assert response.json()['kind'] == 'InsufficientPermission'

    def test_requires_token(self, client):
        assert client.get('/api/reports/compliance').json()['kind'] == 'TokenMissing'

    def test_june_tax_forms(self, client, june_scenario, admin_headers):
        response = client.get(
            '/api/reports/compliance',
            params={'month': '2025-06', 'fileType': 'Tax Forms', 'department': 'all'},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data['window_start'] == '2025-06-01T00:00:00'
        assert data['grace_days'] == 30
        rows = {r['employee_name']: r for r in data['rows'] if r['employee_name'] != 'Root'}
        assert rows['alice']['status'] == 'uploaded'
        assert rows['alice']['department'] == 'HR'
        assert rows['alice']['last_upload_at'] == '2025-06-15T00:00:00'
        assert rows['bob']['status'] == 'missing'
        assert rows['carol']['status'] == 'overdue'
        assert rows['carol']['days_overdue'] == 92

    def test_department_filter(self, client, june_scenario, admin_headers):
        response = client.get(
            '/api/reports/compliance',
            params={'month': '2025-06', 'fileType': 'Tax Forms', 'department': 'Engineering'},
            headers=admin_headers,
        )
        assert [r['employee_name'] for r in response.json()['rows']] == ['bob', 'carol']

    def test_all_file_types(self, client, june_scenario, admin_headers):
        response = client.get(
            '/api/reports/compliance',
            params={'month': '2025-06', 'department': 'HR'},
            headers=admin_headers,
        )
        rows = response.json()['rows']
        assert len(rows) == 7
        assert {r['employee_name'] for r in rows} == {'alice'}

    def test_malformed_month(self, client, admin_headers):
        response = client.get('/api/reports/compliance', params={'month': '06-2025'}, headers=admin_headers)
        assert response.status_code == 400
        assert response.json()['kind'] == 'InvalidReportWindow'


class TestDashboard:
    """Test dashboard summary endpoint"""

    @pytest.fixture
    def files(self, make_user, make_file):
        alice = make_user('alice', department='HR')
        bob = make_user('bob', department='HR')
        now = utc_now()
        make_file(alice, 'Tax Forms', now, filename='a1.pdf')
        make_file(alice, 'Contracts', now, filename='a2.pdf')
        make_file(bob, 'Tax Forms', now, filename='b1.pdf')
        make_file(alice, 'Tax Forms', datetime(2020, 1, 1), filename='old.pdf')
        return alice, bob

    def test_employee_sees_own_files(self, client, files):
        alice, _ = files

        response = client.get('/api/dashboard/summary', headers=auth_headers_for(alice))

        assert response.status_code == 200
        data = response.json()
        assert data['files_uploaded'] == 2
        assert data['total_employees'] == 2
        assert {a['filename'] for a in data['recent_activity']} == {'a1.pdf', 'a2.pdf', 'old.pdf'}
        assert data['categories'][0] == {'category': 'Tax Forms', 'count': 2}

    def test_admin_sees_all_files(self, client, files, make_user):
        admin = make_user('Root', role=Role.ADMIN, department=None)

        data = client.get('/api/dashboard/summary', headers=auth_headers_for(admin)).json()

        assert data['files_uploaded'] == 3
        assert data['total_employees'] == 3
        assert data['categories'] == [
            {'category': 'Tax Forms', 'count': 3},
            {'category': 'Contracts', 'count': 1},
        ]

    def test_requires_token(self, client):
        assert client.get('/api/dashboard/summary').status_code == 401
