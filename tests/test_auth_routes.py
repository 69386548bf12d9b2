"""
Tests for Authentication and User API Endpoints
"""
from datetime import timedelta

from conftest import PASSWORD, token_for
from core.security import authorize
from schemas.user import Role


class TestRegister:
    """Test account registration endpoint"""

    def test_register_employee(self, client):
        response = client.post('/api/auth/register', json={
            'username': 'Alice',
            'email': 'Alice@Example.com',
            'password': PASSWORD,
            'role': 'employee',
            'department': 'HR',
        })

        assert response.status_code == 201
        data = response.json()
        assert data['user']['email'] == 'alice@example.com'
        assert data['user']['account_status'] == 'active'
        assert 'password_hash' not in data['user']
        identity = authorize(data['token'])
        assert identity.id == data['user']['id']
        assert identity.role == Role.EMPLOYEE

    def test_register_admin_without_department(self, client):
        response = client.post('/api/auth/register', json={
            'username': 'Root', 'email': 'root@example.com', 'password': PASSWORD, 'role': 'admin',
        })
        assert response.status_code == 201
        assert response.json()['user']['role'] == 'admin'

    def test_employee_requires_department(self, client):
        response = client.post('/api/auth/register', json={
            'username': 'Alice', 'email': 'alice@example.com', 'password': PASSWORD, 'role': 'employee',
        })
        assert response.status_code == 400
        assert response.json()['kind'] == 'ValidationFailed'

    def test_invalid_role(self, client):
        response = client.post('/api/auth/register', json={
            'username': 'Eve', 'email': 'eve@example.com', 'password': PASSWORD,
            'role': 'superuser', 'department': 'HR',
        })
        assert response.status_code == 422

    def test_duplicate_email(self, client, employee):
        response = client.post('/api/auth/register', json={
            'username': 'Other', 'email': employee.email, 'password': PASSWORD,
            'role': 'employee', 'department': 'HR',
        })
        assert response.status_code == 409
        assert response.json()['kind'] == 'EmailAlreadyRegistered'


class TestLogin:
    """Test login endpoint"""

    def test_login_success(self, client, employee):
        response = client.post('/api/auth/login', json={'email': employee.email, 'password': PASSWORD})

        assert response.status_code == 200
        data = response.json()
        assert data['user']['id'] == employee.id
        assert authorize(data['token']).email == employee.email

    def test_wrong_password_and_unknown_email_look_alike(self, client, employee):
        wrong = client.post('/api/auth/login', json={'email': employee.email, 'password': 'nope-nope'})
        unknown = client.post('/api/auth/login', json={'email': 'ghost@example.com', 'password': PASSWORD})

        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json()

    def test_inactive_account_cannot_login(self, client, employee, admin_headers):
        client.put(f'/api/admin/employees/{employee.id}/status',
                   json={'account_status': 'inactive'}, headers=admin_headers)

        response = client.post('/api/auth/login', json={'email': employee.email, 'password': PASSWORD})

        assert response.status_code == 403
        assert response.json()['kind'] == 'AccountInactive'


class TestGuardOverHttp:
    """Test guard responses on protected endpoints"""

    def test_missing_token(self, client):
        response = client.get('/api/users/me')
        assert response.status_code == 401
        assert response.json() == {'kind': 'TokenMissing', 'detail': 'Access token missing'}

    def test_expired_token(self, client, employee):
        token = token_for(employee, expires_delta=timedelta(minutes=-1))
        response = client.get('/api/users/me', headers={'Authorization': f'Bearer {token}'})
        assert response.status_code == 401
        assert response.json()['kind'] == 'TokenInvalid'

    def test_non_bearer_scheme_counts_as_missing(self, client, employee):
        response = client.get('/api/users/me', headers={'Authorization': f'Basic {token_for(employee)}'})
        assert response.json()['kind'] == 'TokenMissing'

    def test_query_token_rejected_outside_download_links(self, client, employee):
        response = client.get(f'/api/users/me?token={token_for(employee)}')
        assert response.json()['kind'] == 'TokenMissing'

    def test_logout_requires_token(self, client, employee_headers):
        assert client.post('/api/auth/logout').status_code == 401
        assert client.post('/api/auth/logout', headers=employee_headers).json()['success'] is True


class TestUsers:

    def test_me(self, client, employee, employee_headers):
        response = client.get('/api/users/me', headers=employee_headers)
        assert response.status_code == 200
        assert response.json()['department'] == 'HR'

    def test_all_users_is_admin_only(self, client, employee, admin, employee_headers, admin_headers):
        assert client.get('/api/users/all', headers=employee_headers).json()['kind'] == 'InsufficientPermission'

        response = client.get('/api/users/all', headers=admin_headers)
        assert response.status_code == 200
        assert {u['email'] for u in response.json()} == {employee.email, admin.email}
