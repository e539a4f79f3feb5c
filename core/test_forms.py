from datetime import date
from io import BytesIO

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase
from PIL import Image

from .forms import (
    ChangePasswordForm,
    ImageUploadForm,
    MaintenanceForm,
    PaymentForm,
    PropertyForm,
    RegisterForm,
    TenantForm,
    UnitForm,
    UserForm,
)
from .forms.tenant import due_months, rent_month_choices


def png_upload(name='photo.png'):
    buffer = BytesIO()
    Image.new('RGB', (4, 4), 'red').save(buffer, format='PNG')
    return SimpleUploadedFile(name, buffer.getvalue(), content_type='image/png')


class RegisterFormTest(SimpleTestCase):
    def data(self, **overrides):
        data = {
            'first_name': 'Test',
            'last_name': 'User',
            'email': 'test@example.com',
            'phone': '0712345678',
            'role': 'landlord',
            'password1': 'secret123',
            'password2': 'secret123',
        }
        data.update(overrides)
        return data

    def test_password_mismatch(self):
        form = RegisterForm(data=self.data(password2='xyz78900'))
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors['password2'], ['Passwords do not match'])

    def test_short_password(self):
        form = RegisterForm(data=self.data(password1='abc', password2='abc'))
        self.assertFalse(form.is_valid())
        self.assertIn('password1', form.errors)

    def test_admin_cannot_self_register(self):
        self.assertFalse(RegisterForm(data=self.data(role='admin')).is_valid())

    def test_payload(self):
        form = RegisterForm(data=self.data())
        self.assertTrue(form.is_valid(), form.errors)
        payload = form.to_payload()
        self.assertEqual(payload['firstName'], 'Test')
        self.assertEqual(payload['password'], 'secret123')
        self.assertEqual(payload['role'], 'landlord')


class ChangePasswordFormTest(SimpleTestCase):
    def test_new_password_must_differ(self):
        form = ChangePasswordForm(
            data={'current_password': 'secret123', 'new_password': 'secret123', 'confirm_password': 'secret123'}
        )
        self.assertFalse(form.is_valid())
        self.assertIn('new_password', form.errors)


class UserFormTest(SimpleTestCase):
    def data(self, **overrides):
        data = {
            'first_name': 'Jane',
            'last_name': 'Doe',
            'email': 'Jane@Example.com',
            'phone': '0712345678',
            'role': 'tenant',
            'status': 'active',
            'password': 'secret123',
            'confirm_password': 'secret123',
        }
        data.update(overrides)
        return data

    def test_create_requires_password(self):
        form = UserForm(data=self.data(password='', confirm_password=''))
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors['password'], ['Password is required'])

    def test_edit_without_password_omits_it(self):
        form = UserForm(data=self.data(password='', confirm_password=''), is_edit=True)
        self.assertTrue(form.is_valid(), form.errors)
        payload = form.to_payload()
        self.assertNotIn('password', payload)
        self.assertEqual(payload['email'], 'jane@example.com')

    def test_validation_messages(self):
        form = UserForm(data=self.data(email='jane@', phone='0712', password='short', confirm_password='other'))
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors['email'], ['Invalid email format'])
        self.assertEqual(form.errors['phone'], ['Phone number should be at least 10 digits'])
        self.assertEqual(form.errors['password'], ['Password must be at least 8 characters'])
        self.assertEqual(form.errors['confirm_password'], ['Passwords do not match'])

    def test_initial_from_user(self):
        initial = UserForm.initial_from_user({'firstName': 'Jane', 'role': 'landlord'})
        self.assertEqual(initial['first_name'], 'Jane')
        self.assertEqual(initial['status'], 'active')


class PropertyFormTest(SimpleTestCase):
    def test_year_built_range(self):
        form = PropertyForm(data={'name': 'Sunset', 'address': '1 Road', 'city': 'Nairobi', 'property_type': 'residential', 'year_built': 1700})
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors['year_built'], ['Please enter a valid year'])

    def test_blank_country_defaults_to_kenya(self):
        form = PropertyForm(data={'name': 'Sunset', 'address': '1 Road', 'city': 'Nairobi', 'property_type': 'residential'})
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.to_payload()['country'], 'Kenya')

    def test_contact_email(self):
        form = PropertyForm(data={'name': 'Sunset', 'address': '1 Road', 'city': 'Nairobi', 'property_type': 'residential', 'contact_email': 'nope'})
        self.assertFalse(form.is_valid())
        self.assertIn('contact_email', form.errors)


class UnitFormTest(SimpleTestCase):
    def test_rent_must_be_positive(self):
        form = UnitForm(data={'unit_number': 'A1', 'unit_type': 'studio', 'rent_amount': '0', 'status': 'available'})
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors['rent_amount'], ['Valid rent amount is required'])

    def test_payload_defaults(self):
        form = UnitForm(data={'unit_number': ' A1 ', 'unit_type': 'studio', 'rent_amount': '25000', 'status': 'available'})
        self.assertTrue(form.is_valid(), form.errors)
        payload = form.to_payload(property_id='3')
        self.assertEqual(payload['unit_number'], 'A1')
        self.assertEqual(payload['rent_amount'], 25000.0)
        self.assertEqual(payload['floor_number'], 1)
        self.assertEqual(payload['property_id'], '3')

    def test_initial_reads_camel_case_rent(self):
        self.assertEqual(UnitForm.initial_from_unit({'rentAmount': 18000})['rent_amount'], 18000)


class TenantFormTest(SimpleTestCase):
    units = [{'id': 7, 'name': 'B2', 'propertyId': 3, 'rentAmount': 20000}]

    def data(self, **overrides):
        data = {
            'first_name': 'John',
            'last_name': 'Kamau',
            'email': 'John@Example.com',
            'phone': '0722000000',
            'id_number': '12345678',
            'unit_id': '7',
            'lease_start_date': '2024-01-01',
            'security_deposit': '20000',
            'status': 'active',
        }
        data.update(overrides)
        return data

    def test_lease_end_before_start(self):
        form = TenantForm(data=self.data(lease_end_date='2023-12-01'), units=self.units)
        self.assertFalse(form.is_valid())
        self.assertIn('lease_end_date', form.errors)

    def test_unknown_unit_rejected(self):
        form = TenantForm(data=self.data(unit_id='99'), units=self.units)
        self.assertFalse(form.is_valid())
        self.assertIn('unit_id', form.errors)

    def test_payload_takes_rent_and_property_from_unit(self):
        form = TenantForm(data=self.data(), units=self.units)
        self.assertTrue(form.is_valid(), form.errors)
        payload = form.to_payload()
        self.assertEqual(payload['email'], 'john@example.com')
        self.assertEqual(payload['property_id'], 3)
        self.assertEqual(payload['monthly_rent'], 20000)
        self.assertEqual(payload['lease_start_date'], '2024-01-01')
        self.assertEqual(payload['lease_end_date'], '')


class MaintenanceFormTest(SimpleTestCase):
    def data(self):
        return {
            'title': 'Leaking tap',
            'description': 'Kitchen tap drips all night',
            'category': 'plumbing',
            'priority': 'emergency',
            'location': 'Kitchen',
        }

    def test_payload_includes_unit_and_property(self):
        form = MaintenanceForm(data=self.data())
        self.assertTrue(form.is_valid(), form.errors)
        payload = form.to_payload({'unitId': 7, 'propertyId': 3})
        self.assertEqual(payload['unitId'], 7)
        self.assertEqual(payload['propertyId'], 3)
        self.assertEqual(payload['priority'], 'emergency')

    def test_description_limit(self):
        data = self.data()
        data['description'] = 'x' * 501
        self.assertFalse(MaintenanceForm(data=data).is_valid())

    def test_images_are_validated(self):
        form = MaintenanceForm(data=self.data(), files={'images': png_upload()})
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(len(form.cleaned_data['images']), 1)


class ImageUploadFormTest(SimpleTestCase):
    def test_rejects_non_images(self):
        bogus = SimpleUploadedFile('notes.png', b'not an image', content_type='image/png')
        form = ImageUploadForm(files={'images': bogus})
        self.assertFalse(form.is_valid())

    def test_requires_a_file(self):
        self.assertFalse(ImageUploadForm(files={}).is_valid())


class PaymentFormTest(SimpleTestCase):
    choices = [('2024-05', 'May 2024'), ('2024-06', 'June 2024')]

    def form(self, **data):
        return PaymentForm(data=data, month_choices=self.choices, monthly_rent=20000)

    def test_mpesa_payload(self):
        form = self.form(months=['2024-05', '2024-06'], payment_method='mpesa', mpesa_phone='0712 345 678')
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.total(), 40000.0)
        payload = form.to_payload(unit_id=7)
        self.assertEqual(payload['phoneNumber'], '0712345678')
        self.assertEqual(payload['months'], ['2024-05', '2024-06'])
        self.assertEqual(payload['unitId'], 7)

    def test_invalid_phone(self):
        form = self.form(months=['2024-05'], payment_method='mpesa', mpesa_phone='0812345678')
        self.assertFalse(form.is_valid())
        self.assertIn('mpesa_phone', form.errors)

    def test_incomplete_card(self):
        form = self.form(months=['2024-05'], payment_method='card', card_number='4111111111111111')
        self.assertFalse(form.is_valid())
        self.assertEqual(form.non_field_errors(), ['Please fill in all card details.'])

    def test_card_payload_has_no_phone(self):
        form = self.form(
            months=['2024-05'],
            payment_method='card',
            card_number='4111 1111 1111 1111',
            expiry_date='12/27',
            cvv='123',
            holder_name='Jane Doe',
        )
        self.assertTrue(form.is_valid(), form.errors)
        self.assertNotIn('phoneNumber', form.to_payload())

    def test_requires_month(self):
        self.assertIn('months', self.form(payment_method='mpesa', mpesa_phone='0712345678').errors)


class RentMonthChoicesTest(SimpleTestCase):
    def test_skips_paid_months_and_wraps_year(self):
        choices = rent_month_choices(today=date(2024, 11, 10), paid_months={'2024-12'}, count=3, overdue_window=0)
        self.assertEqual(choices, [('2024-11', 'November 2024'), ('2025-01', 'January 2025')])

    def test_unpaid_previous_months_are_overdue(self):
        choices = rent_month_choices(today=date(2025, 2, 14), paid_months={'2024-12'}, count=2)
        self.assertEqual(
            choices,
            [
                ('2024-11', 'November 2024 (overdue)'),
                ('2025-01', 'January 2025 (overdue)'),
                ('2025-02', 'February 2025'),
                ('2025-03', 'March 2025'),
            ],
        )

    def test_due_months_cover_overdue_and_current(self):
        today = date(2025, 2, 14)
        self.assertEqual(due_months(today=today, paid_months={'2025-01'}), ['2024-11', '2024-12', '2025-02'])
        self.assertEqual(due_months(today=today, paid_months={'2024-11', '2024-12', '2025-01', '2025-02'}), [])
