from unittest import mock

from django.conf import settings
from django.contrib.messages import get_messages
from django.test import SimpleTestCase
from django.urls import reverse
from django.utils import timezone

from .api.client import ApiError, Download, TwoFactorRequired
from .forms.tenant import month_start
from .services.auth import AuthResult
from .services.base import Page
from .services.payment import PaymentInitiation
from .services.user import UserFilters
from .session import ROLE_KEY, TOKEN_KEY, USER_KEY
from .views import admin, landlord, public, tenant
from .views.tenant import CHECKOUT_SESSION_KEY


class SessionTestCase(SimpleTestCase):
    def sign_in(self, role, **user):
        user = {'id': 1, 'firstName': 'Jane', 'lastName': 'Doe', 'email': 'jane@example.com', 'role': role, **user}
        session = self.client.session
        session[TOKEN_KEY] = 'token-123'
        session[USER_KEY] = user
        session[ROLE_KEY] = role
        session.save()
        self.client.cookies[settings.SESSION_COOKIE_NAME] = session.session_key
        return user

    def messages_for(self, response):
        return [str(message) for message in get_messages(response.wsgi_request)]


class AccessControlTest(SessionTestCase):
    def test_anonymous_user_is_sent_to_login(self):
        response = self.client.get(reverse('landlord_dashboard'))
        self.assertRedirects(response, f"{reverse('login')}?next=/landlord/", fetch_redirect_response=False)

    def test_wrong_role_goes_to_own_dashboard(self):
        self.sign_in('tenant')
        response = self.client.get(reverse('admin_dashboard'))
        self.assertRedirects(response, reverse('tenant_dashboard'), fetch_redirect_response=False)
        self.assertIn('Only administrators can access that page.', self.messages_for(response))

    def test_splash_redirects_by_role(self):
        self.assertRedirects(self.client.get('/'), reverse('login'), fetch_redirect_response=False)
        self.sign_in('landlord')
        self.assertRedirects(self.client.get('/'), reverse('landlord_dashboard'), fetch_redirect_response=False)

    def test_signed_in_user_skips_login_page(self):
        self.sign_in('admin')
        response = self.client.get(reverse('login'))
        self.assertRedirects(response, reverse('admin_dashboard'), fetch_redirect_response=False)


@mock.patch.object(public.LoginView, 'service_class')
class LoginViewTest(SessionTestCase):
    def post(self, **extra):
        data = {'email': 'jane@example.com', 'password': 'secret123', 'role': 'tenant', **extra}
        return self.client.post(reverse('login'), data)

    def test_get_renders_form(self, service_class):
        response = self.client.get(reverse('login'), {'role': 'landlord'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['form'].initial['role'], 'landlord')

    def test_success_stores_session(self, service_class):
        service_class.return_value.login.return_value = AuthResult(
            user={'id': 5, 'role': 'tenant', 'firstName': 'Jane', 'lastName': 'Doe'}, token='abc'
        )
        response = self.post()
        self.assertRedirects(response, reverse('tenant_dashboard'), fetch_redirect_response=False)
        self.assertEqual(self.client.session[TOKEN_KEY], 'abc')
        self.assertEqual(self.client.session[ROLE_KEY], 'tenant')
        self.assertIn('Welcome back, Jane Doe!', self.messages_for(response))
        service_class.return_value.login.assert_called_once_with('jane@example.com', 'secret123', 'tenant', None)

    def test_next_parameter(self, service_class):
        service_class.return_value.login.return_value = AuthResult(user={'id': 5, 'role': 'tenant'}, token='abc')
        response = self.post(next='/tenant/payments/')
        self.assertRedirects(response, '/tenant/payments/', fetch_redirect_response=False)

    def test_external_next_is_ignored(self, service_class):
        service_class.return_value.login.return_value = AuthResult(user={'id': 5, 'role': 'tenant'}, token='abc')
        response = self.post(next='https://evil.example.com/')
        self.assertRedirects(response, reverse('tenant_dashboard'), fetch_redirect_response=False)

    def test_two_factor_prompt(self, service_class):
        service_class.return_value.login.side_effect = TwoFactorRequired('Two-factor authentication required', 403)
        response = self.post()
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.context['requires_2fa'])
        self.assertNotIn(TOKEN_KEY, self.client.session)

    def test_api_error_is_shown(self, service_class):
        service_class.return_value.login.side_effect = ApiError('Invalid credentials', 401)
        response = self.post()
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Invalid credentials')


class LogoutViewTest(SessionTestCase):
    def test_logout_clears_session(self):
        self.sign_in('landlord')
        response = self.client.post(reverse('logout'))
        self.assertRedirects(response, reverse('login'), fetch_redirect_response=False)
        self.assertNotIn(TOKEN_KEY, self.client.session)


@mock.patch.object(public.RegisterView, 'service_class')
class RegisterViewTest(SessionTestCase):
    def test_register_signs_in(self, service_class):
        service_class.return_value.register.return_value = AuthResult(user={'id': 8, 'role': 'landlord'}, token='new')
        response = self.client.post(
            reverse('register'),
            {
                'first_name': 'Ann',
                'last_name': 'Owner',
                'email': 'ann@example.com',
                'phone': '0712345678',
                'role': 'landlord',
                'password1': 'secret123',
                'password2': 'secret123',
            },
        )
        self.assertRedirects(response, reverse('landlord_dashboard'), fetch_redirect_response=False)
        self.assertEqual(self.client.session[TOKEN_KEY], 'new')


@mock.patch.object(admin.AdminUserListView, 'service_class')
class AdminUserListViewTest(SessionTestCase):
    def setUp(self):
        self.sign_in('admin')

    def test_lists_users_with_filters(self, service_class):
        service = service_class.return_value
        service.list.return_value = Page(
            items=[{'id': 2, 'firstName': 'John', 'lastName': 'Kamau', 'email': 'john@example.com', 'role': 'tenant', 'status': 'active'}],
            total=11,
            page=2,
            total_pages=2,
        )
        service.stats.return_value = {'totalUsers': 11}
        response = self.client.get(reverse('admin_users'), {'role': 'tenant', 'page': '2'})
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'John Kamau')
        filters = service.list.call_args.args[0]
        self.assertEqual(filters, UserFilters(page=2, limit=10, role='tenant'))
        self.assertEqual(response.context['pagination'].start_index, 11)

    def test_list_failure_shows_empty_page(self, service_class):
        service_class.return_value.list.side_effect = ApiError('Failed to fetch users', 500)
        service_class.return_value.stats.return_value = {}
        response = self.client.get(reverse('admin_users'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['users'], [])
        self.assertIn('Failed to fetch users', self.messages_for(response))

    def test_expired_token_signs_out(self, service_class):
        service_class.return_value.list.side_effect = ApiError('Token expired', 401)
        response = self.client.get(reverse('admin_users'))
        self.assertRedirects(response, reverse('login'), fetch_redirect_response=False)
        self.assertNotIn(TOKEN_KEY, self.client.session)


class AdminUserActionTest(SessionTestCase):
    def setUp(self):
        self.sign_in('admin')

    def test_reset_password_shows_new_password_in_page_only(self):
        with mock.patch.object(admin.AdminUserResetPasswordView, 'service_class') as service_class:
            service_class.return_value.reset_password.return_value = ('Tmp12345', 'Password reset successfully')
            response = self.client.post(reverse('admin_user_reset_password', args=['4']))
        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, 'admin/password_reset_done.html')
        self.assertContains(response, 'Tmp12345')
        self.assertIn('no-store', response['Cache-Control'])
        self.assertEqual(self.messages_for(response), [])
        self.assertNotIn('Tmp12345', response.cookies.output())

    def test_reset_password_without_generated_password_redirects(self):
        with mock.patch.object(admin.AdminUserResetPasswordView, 'service_class') as service_class:
            service_class.return_value.reset_password.return_value = (None, 'Reset link sent')
            response = self.client.post(reverse('admin_user_reset_password', args=['4']))
        self.assertRedirects(response, reverse('admin_users'), fetch_redirect_response=False)
        self.assertIn('Reset link sent', self.messages_for(response))

    def test_delete_error_goes_back_to_list(self):
        with mock.patch.object(admin.AdminUserDeleteView, 'service_class') as service_class:
            service_class.return_value.delete.side_effect = ApiError('Cannot delete your own account', 400)
            response = self.client.post(reverse('admin_user_delete', args=['1']))
        self.assertRedirects(response, reverse('admin_users'), fetch_redirect_response=False)
        self.assertIn('Cannot delete your own account', self.messages_for(response))

    def test_actions_reject_get(self):
        response = self.client.get(reverse('admin_user_delete', args=['1']))
        self.assertEqual(response.status_code, 405)

    def test_missing_user_on_edit(self):
        with mock.patch.object(admin.AdminUserUpdateView, 'service_class') as service_class:
            service_class.return_value.get.side_effect = ApiError('User not found', 404)
            response = self.client.get(reverse('admin_user_edit', args=['99']))
        self.assertRedirects(response, reverse('admin_users'), fetch_redirect_response=False)

    def test_export(self):
        with mock.patch.object(admin.AdminUserExportView, 'service_class') as service_class:
            service_class.return_value.export.return_value = Download(b'id,email\n', 'users.csv', 'text/csv')
            response = self.client.get(reverse('admin_user_export'), {'role': 'tenant'})
        self.assertEqual(response.content, b'id,email\n')
        self.assertEqual(response['Content-Disposition'], 'attachment; filename="users.csv"')


class LandlordViewsTest(SessionTestCase):
    def setUp(self):
        self.sign_in('landlord')

    def test_maintenance_status_rejects_unknown_status(self):
        with mock.patch.object(landlord.LandlordMaintenanceStatusView, 'service_class') as service_class:
            response = self.client.post(reverse('landlord_maintenance_status', args=['3']), {'status': 'done'})
        self.assertRedirects(response, reverse('landlord_maintenance'), fetch_redirect_response=False)
        service_class.return_value.update_status.assert_not_called()

    def test_maintenance_status_update(self):
        with mock.patch.object(landlord.LandlordMaintenanceStatusView, 'service_class') as service_class:
            response = self.client.post(
                reverse('landlord_maintenance_status', args=['3']),
                {'status': 'resolved', 'response_notes': ' Fixed '},
            )
        service_class.return_value.update_status.assert_called_once_with('3', 'resolved', 'Fixed')
        self.assertIn('Maintenance status updated successfully.', self.messages_for(response))

    def test_property_create(self):
        with mock.patch.object(landlord.LandlordPropertyCreateView, 'service_class') as service_class:
            service_class.return_value.create.return_value = ({'id': 3}, 'Property created successfully')
            response = self.client.post(
                reverse('landlord_property_create'),
                {'name': 'Sunset', 'address': '1 Road', 'city': 'Nairobi', 'property_type': 'residential'},
            )
        self.assertRedirects(response, reverse('landlord_properties'), fetch_redirect_response=False)
        payload = service_class.return_value.create.call_args.args[0]
        self.assertEqual(payload['country'], 'Kenya')

    def test_tenant_remove_unit(self):
        with mock.patch.object(landlord.LandlordTenantRemoveUnitView, 'service_class') as service_class:
            service_class.return_value.remove_unit.return_value = ''
            response = self.client.post(reverse('landlord_tenant_remove_unit', args=['6']))
        self.assertRedirects(response, reverse('landlord_tenants'), fetch_redirect_response=False)
        self.assertIn('Tenant removed from unit.', self.messages_for(response))

    def test_settings_profile_update_refreshes_session(self):
        with mock.patch.object(landlord.LandlordSettingsView, 'service_class') as service_class:
            service_class.return_value.update_profile.return_value = ({'id': 1, 'firstName': 'Janet'}, '')
            response = self.client.post(
                reverse('landlord_settings'),
                {'form_type': 'profile', 'first_name': 'Janet', 'last_name': 'Doe'},
            )
        self.assertRedirects(response, reverse('landlord_settings'), fetch_redirect_response=False)
        self.assertEqual(self.client.session[USER_KEY]['firstName'], 'Janet')
        self.assertEqual(self.client.session[USER_KEY]['email'], 'jane@example.com')


class TenantViewsTest(SessionTestCase):
    def setUp(self):
        self.sign_in('tenant')

    def test_dashboard(self):
        context = {
            'unit': None,
            'property': None,
            'recent_payments': [],
            'last_payment': None,
            'maintenance_requests': [],
            'pending_maintenance': 0,
            'monthly_rent': None,
        }
        with mock.patch.object(tenant.TenantDashboardView, 'service_class') as service_class:
            service_class.return_value.build_context.return_value = context
            response = self.client.get(reverse('tenant_dashboard'))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Not assigned')

    def test_payment_stores_checkout_request(self):
        month = f'{timezone.localdate():%Y-%m}'
        with mock.patch.object(tenant.TenantPaymentsView, 'service_class') as service_class:
            service = service_class.return_value
            service.list.return_value = Page.empty()
            service.create.return_value = PaymentInitiation(payment=None, checkout_request_id='ws_CO_1', message='')
            response = self.client.post(
                reverse('tenant_payments'),
                {'months': [month], 'payment_method': 'mpesa', 'mpesa_phone': '0712345678'},
            )
        self.assertRedirects(response, reverse('tenant_payments'), fetch_redirect_response=False)
        self.assertEqual(self.client.session[CHECKOUT_SESSION_KEY], 'ws_CO_1')
        payload = service.create.call_args.args[0]
        self.assertEqual(payload['phoneNumber'], '0712345678')
        self.assertEqual(payload['months'], [month])

    def payments_service(self, service_class, paid_month):
        paid = {'id': 3, 'status': 'successful', 'paymentDate': f'{paid_month}-02T10:00:00Z'}

        def list_payments(filters):
            if filters.status == 'successful' and filters.page == 1:
                return Page(items=[paid], total=1, page=1, total_pages=1)
            return Page(items=[], total=11, page=filters.page, total_pages=2)

        service = service_class.return_value
        service.list.side_effect = list_payments
        return service

    def test_paid_month_hidden_on_later_history_pages(self):
        month = f'{timezone.localdate():%Y-%m}'
        with mock.patch.object(tenant.TenantPaymentsView, 'service_class') as service_class:
            service = self.payments_service(service_class, month)
            response = self.client.get(reverse('tenant_payments'), {'page': 2, 'status': 'failed'})
        self.assertEqual(response.status_code, 200)
        choices = [key for key, _ in response.context['payment_form'].fields['months'].choices]
        self.assertNotIn(month, choices)
        paid_filters = [call.args[0] for call in service.list.call_args_list if call.args[0].status == 'successful']
        self.assertEqual(len(paid_filters), 1)
        self.assertEqual(paid_filters[0].tenant_id, '1')

    def test_paying_an_already_paid_month_is_rejected(self):
        month = f'{timezone.localdate():%Y-%m}'
        with mock.patch.object(tenant.TenantPaymentsView, 'service_class') as service_class:
            service = self.payments_service(service_class, month)
            response = self.client.post(
                f"{reverse('tenant_payments')}?status=failed&page=2",
                {'months': [month], 'payment_method': 'mpesa', 'mpesa_phone': '0712345678'},
            )
        self.assertEqual(response.status_code, 200)
        self.assertIn('months', response.context['payment_form'].errors)
        service.create.assert_not_called()

    def test_overdue_months_are_offered_and_preselected(self):
        today = timezone.localdate()
        last_month = f'{month_start(today, -1):%Y-%m}'
        with mock.patch.object(tenant.TenantPaymentsView, 'service_class') as service_class:
            self.payments_service(service_class, last_month)
            response = self.client.get(reverse('tenant_payments'))
        form = response.context['payment_form']
        labels = dict(form.fields['months'].choices)
        expected_due = [f'{month_start(today, -3):%Y-%m}', f'{month_start(today, -2):%Y-%m}', f'{today:%Y-%m}']
        self.assertEqual(form.initial['months'], expected_due)
        self.assertNotIn(last_month, labels)
        self.assertTrue(labels[expected_due[0]].endswith('(overdue)'))
        self.assertFalse(labels[f'{today:%Y-%m}'].endswith('(overdue)'))

    def test_payment_status_clears_checkout(self):
        session = self.client.session
        session[CHECKOUT_SESSION_KEY] = 'ws_CO_1'
        session.save()
        self.client.cookies[settings.SESSION_COOKIE_NAME] = session.session_key
        with mock.patch.object(tenant.TenantPaymentStatusView, 'service_class') as service_class:
            service_class.return_value.mpesa_status.return_value = ('successful', {'id': 9})
            response = self.client.get(reverse('tenant_payment_status', args=['ws_CO_1']))
        self.assertRedirects(response, reverse('tenant_payments'), fetch_redirect_response=False)
        self.assertNotIn(CHECKOUT_SESSION_KEY, self.client.session)
        self.assertIn('Payment received. Thank you!', self.messages_for(response))
