import random
import unittest
from fastapi.testclient import TestClient
from weekplan.api.api_run import app
from weekplan.api.services import Services, get_services
from weekplan.events.Event_Bus import EventBus
from weekplan.tests.helpers import (
    ADMIN_USER, FAMILY_ID, MEMBER_USER, PARENT_USER, STRANGER_USER, Workspace,
)


class TestPlansAPI(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        self.ws = Workspace()
        self.services = Services(self.ws.data_dir, rng=random.Random(5), bus=EventBus())
        app.dependency_overrides[get_services] = lambda: self.services
        resp = self.client.post(f'/api/families/{FAMILY_ID}/plans/generate',
                                json={'mode': 'auto', 'week_start_date': '2026-10-19'},
                                headers={'X-User-Id': ADMIN_USER})
        self.assertEqual(resp.status_code, 201)
        self.data = resp.json()['data']
        self.plan_id = self.data['plan']['id']
        self.meal = next(m for m in self.data['plan']['meals'] if m['recipe_id'])

    def tearDown(self):
        app.dependency_overrides.clear()
        self.services.close()
        self.ws.cleanup()

    def _headers(self, user=ADMIN_USER):
        return {'X-User-Id': user}

    def test_generate_returns_plan_and_summary(self):
        self.assertEqual(len(self.data['plan']['meals']), 14)
        self.assertEqual(self.data['summary']['total_slots'], 14)
        self.assertEqual(self.data['plan']['status'], 'DRAFT')
        resp = self.client.get(f'/api/families/{FAMILY_ID}/plans', headers=self._headers(MEMBER_USER))
        self.assertEqual(resp.json()['data']['count'], 1)

    def test_errors_carry_codes(self):
        resp = self.client.get(f'/api/plans/{self.plan_id}', headers=self._headers(STRANGER_USER))
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json(), {'status': 'error', 'code': 'UNAUTHORIZED',
                                       'message': 'You are not a member of this family'})
        resp = self.client.get('/api/plans/unknown', headers=self._headers())
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()['code'], 'NOT_FOUND')

    def test_user_header_is_required(self):
        resp = self.client.get(f'/api/plans/{self.plan_id}')
        self.assertEqual(resp.status_code, 422)

    def test_bad_generation_payload(self):
        resp = self.client.post(f'/api/families/{FAMILY_ID}/plans/generate',
                                json={'mode': 'weekly', 'week_start_date': '2026-10-19'},
                                headers=self._headers())
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()['status'], 'error')
        self.assertEqual(resp.json()['code'], 'INVALID_PAYLOAD')
        resp = self.client.post(f'/api/families/{FAMILY_ID}/plans/generate', json=['auto'],
                                headers=self._headers())
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()['code'], 'INVALID_PAYLOAD')

    def test_bad_meal_and_comment_payloads(self):
        resp = self.client.post(f'/api/plans/{self.plan_id}/meals', json={'day_of_week': 'someday'},
                                headers=self._headers())
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()['code'], 'INVALID_PAYLOAD')
        url = f"/api/plans/{self.plan_id}/meals/{self.meal['id']}/comments"
        for body in ({'content': '   '}, {}):
            resp = self.client.post(url, json=body, headers=self._headers(MEMBER_USER))
            self.assertEqual(resp.status_code, 400)
            self.assertEqual(set(resp.json()), {'status', 'code', 'message'})
            self.assertEqual(resp.json()['code'], 'INVALID_PAYLOAD')

    def test_member_cannot_swap(self):
        resp = self.client.post(f"/api/plans/{self.plan_id}/meals/{self.meal['id']}/swap",
                                json={'new_recipe_id': 'fav-soup'}, headers=self._headers(MEMBER_USER))
        self.assertEqual(resp.status_code, 403)
        resp = self.client.post(f"/api/plans/{self.plan_id}/meals/{self.meal['id']}/swap",
                                json={'new_recipe_id': 'fav-soup'}, headers=self._headers(PARENT_USER))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['data']['meal']['recipe_id'], 'fav-soup')

    def test_unknown_operation(self):
        resp = self.client.post(f"/api/plans/{self.plan_id}/meals/{self.meal['id']}/explode",
                                json={}, headers=self._headers())
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()['code'], 'UNKNOWN_OPERATION')

    def test_lock_then_swap_conflicts(self):
        url = f"/api/plans/{self.plan_id}/meals/{self.meal['id']}"
        self.assertEqual(self.client.post(f'{url}/lock', json={'locked': True},
                                          headers=self._headers(MEMBER_USER)).status_code, 200)
        resp = self.client.post(f'{url}/swap', json={'new_recipe_id': 'fav-soup'}, headers=self._headers())
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()['code'], 'MEAL_LOCKED')

    def test_delete_skips_meal(self):
        resp = self.client.delete(f"/api/plans/{self.plan_id}/meals/{self.meal['id']}",
                                  params={'skip_reason': 'Restaurant'}, headers=self._headers())
        body = resp.json()
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(body['skipped'])
        self.assertIn('skipped', body['message'].lower())
        self.assertTrue(body['data']['meal']['is_skipped'])
        plan = self.client.get(f'/api/plans/{self.plan_id}', headers=self._headers()).json()['data']['plan']
        self.assertEqual(len(plan['meals']), 14)
        resp = self.client.post(f"/api/plans/{self.plan_id}/meals/{self.meal['id']}/restore", headers=self._headers())
        self.assertFalse(resp.json()['data']['meal']['is_skipped'])

    def test_comments(self):
        url = f"/api/plans/{self.plan_id}/meals/{self.meal['id']}/comments"
        resp = self.client.post(url, json={'content': 'Yum'}, headers=self._headers(MEMBER_USER))
        self.assertEqual(resp.status_code, 201)
        comment_id = resp.json()['data']['comment']['id']
        self.assertEqual(self.client.get(url, headers=self._headers()).json()['data']['count'], 1)
        resp = self.client.delete(f'{url}/{comment_id}', headers=self._headers(MEMBER_USER))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.client.get(url, headers=self._headers()).json()['data']['count'], 0)

    def test_validate_lock_and_audit_log(self):
        resp = self.client.post(f'/api/plans/{self.plan_id}/validate', headers=self._headers(PARENT_USER))
        self.assertEqual(resp.json()['data']['plan']['status'], 'VALIDATED')
        resp = self.client.post(f'/api/plans/{self.plan_id}/lock', headers=self._headers())
        self.assertEqual(resp.json()['data']['plan']['status'], 'LOCKED')
        resp = self.client.get(f'/api/plans/{self.plan_id}/audit-log', headers=self._headers())
        types = [e['change_type'] for e in resp.json()['data']['events']]
        self.assertEqual(types, ['PLAN_CREATED', 'PLAN_STATUS_CHANGED', 'PLAN_STATUS_CHANGED'])
        resp = self.client.get(f'/api/plans/{self.plan_id}/audit-log', headers=self._headers(PARENT_USER))
        self.assertEqual(resp.status_code, 403)

    def test_cutoff_and_template_switch(self):
        resp = self.client.put(f'/api/plans/{self.plan_id}/cutoff',
                               json={'cutoff_date': '2026-10-25', 'cutoff_time': '18:00'},
                               headers=self._headers())
        self.assertEqual(resp.json()['data']['plan']['cutoff_time'], '18:00')
        resp = self.client.post(f'/api/plans/{self.plan_id}/template', json={'template_id': 'tpl-dinners'},
                                headers=self._headers())
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.json()['data']['plan']['meals']), 7)

    def test_family_settings(self):
        resp = self.client.post(f'/api/families/{FAMILY_ID}/templates',
                                json={'name': 'Weekend', 'schedule': [{'day_of_week': 'saturday',
                                                                       'meal_types': ['lunch']}]},
                                headers=self._headers(PARENT_USER))
        self.assertEqual(resp.status_code, 201)
        resp = self.client.post(f'/api/families/{FAMILY_ID}/templates', json={'name': 'Bad', 'schedule': []},
                                headers=self._headers())
        self.assertEqual(resp.json()['code'], 'INVALID_JSON_SCHEDULE')
        templates = self.client.get(f'/api/families/{FAMILY_ID}/templates', headers=self._headers(MEMBER_USER))
        self.assertEqual(len(templates.json()['data']['templates']), 3)
        resp = self.client.put(f'/api/families/{FAMILY_ID}/diet-profile', json={'vegan': True},
                               headers=self._headers(MEMBER_USER))
        self.assertEqual(resp.status_code, 403)
        resp = self.client.put(f'/api/families/{FAMILY_ID}/diet-profile',
                               json={'vegan': True, 'allergies': ['Soy']}, headers=self._headers())
        self.assertEqual(resp.json()['data']['diet_profile']['allergies'], ['soy'])


if __name__ == '__main__':
    unittest.main()
