from datetime import date, datetime

from django.test import SimpleTestCase

from .utils.data_helpers import (
    camelize_keys,
    format_currency,
    format_date,
    full_name,
    normalize_maintenance_request,
    normalize_payment,
    normalize_property,
    normalize_unit,
    normalize_user,
    occupancy_rate,
    snakeize_keys,
    status_color,
    time_greeting,
)


class NormalizeUserTest(SimpleTestCase):
    def test_snake_case_fields_get_camel_case_aliases(self):
        user = normalize_user({'id': 1, 'first_name': 'Jane', 'last_name': 'Doe', 'unit_id': 7})
        self.assertEqual(user['firstName'], 'Jane')
        self.assertEqual(user['lastName'], 'Doe')
        self.assertEqual(user['unitId'], 7)
        self.assertEqual(user['first_name'], 'Jane')

    def test_camel_case_value_wins(self):
        user = normalize_user({'firstName': 'Camel', 'first_name': 'Snake'})
        self.assertEqual(user['firstName'], 'Camel')

    def test_none_input_returns_none(self):
        self.assertIsNone(normalize_user(None))
        self.assertIsNone(normalize_payment(None))

    def test_empty_record_is_still_normalized(self):
        user = normalize_user({})
        self.assertEqual(user, {key: None for key in user})
        self.assertIn('firstName', user)
        self.assertIsNone(normalize_payment({})['tenantName'])
        self.assertEqual(normalize_unit({})['imageUrls'], [])

    def test_normalizing_twice_is_stable(self):
        once = normalize_user({'first_name': 'Jane', 'created_at': '2024-01-05'})
        self.assertEqual(normalize_user(once), once)


class NormalizeRecordsTest(SimpleTestCase):
    def test_property_image_urls_default_to_empty_list(self):
        prop = normalize_property({'id': 3, 'landlord_id': 9})
        self.assertEqual(prop['imageUrls'], [])
        self.assertEqual(prop['landlordId'], 9)

    def test_unit_rent_amount_alias(self):
        unit = normalize_unit({'id': 2, 'rent_amount': 25000, 'property_id': 3, 'image_urls': ['a.jpg']})
        self.assertEqual(unit['rentAmount'], 25000)
        self.assertEqual(unit['propertyId'], 3)
        self.assertEqual(unit['imageUrls'], ['a.jpg'])

    def test_payment_display_names_from_nested_records(self):
        payment = normalize_payment(
            {
                'id': 1,
                'payment_date': '2024-02-01',
                'tenant': {'first_name': 'Jane', 'last_name': 'Doe'},
                'unit': {'name': 'A1'},
                'property': {'name': 'Sunset Apartments'},
            }
        )
        self.assertEqual(payment['tenantName'], 'Jane Doe')
        self.assertEqual(payment['unitName'], 'A1')
        self.assertEqual(payment['propertyName'], 'Sunset Apartments')
        self.assertEqual(payment['paymentDate'], '2024-02-01')

    def test_payment_display_names_from_flat_fields(self):
        payment = normalize_payment({'tenant_name': 'John', 'unit_name': 'B2', 'property_name': 'Hill View'})
        self.assertEqual(payment['tenantName'], 'John')
        self.assertEqual(payment['unitName'], 'B2')
        self.assertEqual(payment['propertyName'], 'Hill View')

    def test_maintenance_response_notes_alias(self):
        request = normalize_maintenance_request({'response_notes': 'Fixed', 'image_url': 'x.png'})
        self.assertEqual(request['responseNotes'], 'Fixed')
        self.assertEqual(request['imageUrl'], 'x.png')


class KeyConversionTest(SimpleTestCase):
    def test_camelize_and_back(self):
        record = {'first_name': 'Jane', 'emergency_contact_phone': '0700'}
        camel = camelize_keys(record)
        self.assertEqual(camel, {'firstName': 'Jane', 'emergencyContactPhone': '0700'})
        self.assertEqual(snakeize_keys(camel), record)

    def test_conversions_are_idempotent(self):
        camel = camelize_keys({'unit_id': 1})
        self.assertEqual(camelize_keys(camel), camel)
        snake = snakeize_keys({'unitId': 1})
        self.assertEqual(snakeize_keys(snake), snake)


class FormatCurrencyTest(SimpleTestCase):
    def test_whole_amount(self):
        self.assertEqual(format_currency(50000), 'KSh 50,000')

    def test_decimals_are_trimmed(self):
        self.assertEqual(format_currency('1234.50'), 'KSh 1,234.5')
        self.assertEqual(format_currency(99.999), 'KSh 100')

    def test_missing_or_invalid_amounts(self):
        self.assertEqual(format_currency(None), 'KSh 0')
        self.assertEqual(format_currency('abc'), 'KSh 0')
        self.assertEqual(format_currency(float('nan')), 'KSh 0')

    def test_negative_and_other_currency(self):
        self.assertEqual(format_currency(-500), '-KSh 500')
        self.assertEqual(format_currency(1200.5, 'USD'), 'USD 1,200.5')


class FormatDateTest(SimpleTestCase):
    def test_iso_strings_and_dates(self):
        self.assertEqual(format_date('2024-01-05T10:00:00Z'), 'Jan 5, 2024')
        self.assertEqual(format_date(date(2024, 12, 25)), 'Dec 25, 2024')
        self.assertEqual(format_date('2024-03-01', '%d/%m/%Y'), '01/03/2024')

    def test_empty_and_invalid(self):
        self.assertEqual(format_date(''), '')
        self.assertEqual(format_date(None), '')
        with self.assertLogs('core.utils.data_helpers', level='WARNING'):
            self.assertEqual(format_date('not a date'), '')


class StatusAndRatesTest(SimpleTestCase):
    def test_status_colors(self):
        self.assertEqual(status_color('successful', 'payment'), 'green')
        self.assertEqual(status_color('pending', 'maintenance'), 'yellow')
        self.assertEqual(status_color('unknown', 'unit'), 'gray')
        self.assertEqual(status_color(None), 'gray')

    def test_occupancy_rate(self):
        self.assertEqual(occupancy_rate(1, 3), 33.3)
        self.assertEqual(occupancy_rate(5, 0), 0)

    def test_time_greeting(self):
        self.assertEqual(time_greeting(datetime(2024, 1, 1, 9))['text'], 'morning')
        self.assertEqual(time_greeting(datetime(2024, 1, 1, 15))['text'], 'afternoon')
        self.assertEqual(time_greeting(datetime(2024, 1, 1, 20))['icon'], 'moon')

    def test_full_name_falls_back_to_email(self):
        self.assertEqual(full_name({'firstName': 'Jane', 'lastName': 'Doe'}), 'Jane Doe')
        self.assertEqual(full_name({'email': 'jane@example.com'}), 'jane@example.com')
        self.assertEqual(full_name(None), '')
