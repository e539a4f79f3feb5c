from django.template import Context, Template
from django.test import RequestFactory, SimpleTestCase

from .context_processors import session_user


class DigiplotFiltersTest(SimpleTestCase):
    def render(self, source, **context):
        return Template('{% load digiplot %}' + source).render(Context(context))

    def test_currency_and_dates(self):
        self.assertEqual(self.render('{{ amount|currency }}', amount=50000), 'KSh 50,000')
        self.assertEqual(self.render('{{ value|date_display }}', value='2024-02-01'), 'Feb 1, 2024')

    def test_status_color_kind(self):
        self.assertEqual(self.render("{{ status|status_color:'payment' }}", status='failed'), 'red')

    def test_get_item(self):
        self.assertEqual(self.render("{{ stats|get_item:'totalUsers' }}", stats={'totalUsers': 4}), '4')

    def test_page_url_keeps_filters(self):
        request = RequestFactory().get('/admin/users/', {'role': 'tenant', 'page': '1'})
        output = self.render('{% page_url 3 %}', request=request)
        self.assertIn('role=tenant', output)
        self.assertIn('page=3', output)
        self.assertNotIn('page=1', output)


class SessionUserContextTest(SimpleTestCase):
    def test_without_session(self):
        context = session_user(RequestFactory().get('/'))
        self.assertIsNone(context['current_user'])
        self.assertEqual(context['dashboard_url_name'], 'login')

    def test_with_session(self):
        request = RequestFactory().get('/')
        request.session = {
            'digiplot_user': {'firstName': 'Jane', 'lastName': 'Doe'},
            'digiplot_role': 'landlord',
        }
        context = session_user(request)
        self.assertEqual(context['current_user_name'], 'Jane Doe')
        self.assertEqual(context['dashboard_url_name'], 'landlord_dashboard')
