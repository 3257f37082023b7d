"""
Integration tests for task API endpoints.
Covers tenant isolation, role checks and checklist-driven progress.
"""
import json
from datetime import timedelta
from django.test import TestCase, Client
from django.contrib.auth import get_user_model
from django.utils import timezone

from apps.identity.models import UserRole
from apps.identity.jwt_auth import create_access_token
from apps.tasks.models import Task, TaskStatus


User = get_user_model()


def auth_header(user) -> dict:
    return {'HTTP_AUTHORIZATION': f'Bearer {create_access_token(user)}'}


def make_user(email, role=UserRole.MEMBER, admin=None):
    return User.objects.create_user(
        username=email,
        email=email,
        password='secret123',
        name=email.split('@')[0].title(),
        role=role,
        admin=admin,
    )


class TaskAPITestBase(TestCase):

    def setUp(self):
        self.client = Client()
        self.admin = make_user('admin@example.com', role=UserRole.ADMIN)
        self.member = make_user('member@example.com', admin=self.admin)
        self.teammate = make_user('teammate@example.com', admin=self.admin)

        self.other_admin = make_user('other@example.com', role=UserRole.ADMIN)
        self.outsider = make_user('outsider@example.com', admin=self.other_admin)

        self.due = timezone.now() + timedelta(days=5)

    def _send(self, method, url, user, payload=None):
        return getattr(self.client, method)(
            url,
            data=json.dumps(payload or {}),
            content_type='application/json',
            **auth_header(user),
        )

    def _create_task(self, **overrides):
        assignees = overrides.pop('assignees', [self.member])
        task = Task.objects.create(
            admin=self.admin,
            created_by=self.admin,
            title=overrides.pop('title', 'Write report'),
            due_date=overrides.pop('due_date', self.due),
            **overrides,
        )
        task.assigned_to.set(assignees)
        return task


class CreateTaskAPITest(TaskAPITestBase):

    def _payload(self, **overrides):
        payload = {
            'title': 'Write report',
            'description': 'Quarterly numbers',
            'priority': 'High',
            'due_date': self.due.isoformat(),
            'assigned_to': [str(self.member.id)],
            'todo_checklist': [
                {'text': 'Collect data', 'completed': True},
                {'text': 'Write draft', 'completed': False},
            ],
        }
        payload.update(overrides)
        return payload

    def test_admin_creates_task(self):
        response = self._send('post', '/api/tasks', self.admin, self._payload())
        self.assertEqual(response.status_code, 201)

        data = response.json()
        self.assertEqual(data['message'], 'Task created successfully')
        task = data['task']
        self.assertEqual(task['admin_id'], str(self.admin.id))
        self.assertEqual(task['created_by_id'], str(self.admin.id))
        self.assertEqual(task['progress'], 50)
        self.assertEqual(task['status'], TaskStatus.IN_PROGRESS)
        self.assertEqual(task['completed_todo_count'], 1)
        self.assertEqual([a['id'] for a in task['assigned_to']], [str(self.member.id)])

    def test_member_cannot_create_task(self):
        response = self._send('post', '/api/tasks', self.member, self._payload())
        self.assertEqual(response.status_code, 403)
        self.assertEqual(Task.objects.count(), 0)

    def test_assigned_to_must_be_a_list(self):
        response = self._send(
            'post', '/api/tasks', self.admin, self._payload(assigned_to=str(self.member.id))
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'assignedTo must be an array of user IDs')

    def test_cannot_assign_users_of_other_tenant(self):
        response = self._send(
            'post', '/api/tasks', self.admin, self._payload(assigned_to=[str(self.outsider.id)])
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(Task.objects.count(), 0)

    def test_cannot_assign_the_admin(self):
        response = self._send(
            'post', '/api/tasks', self.admin, self._payload(assigned_to=[str(self.admin.id)])
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json()['message'], 'Tasks can only be assigned to members of your team'
        )
        self.assertEqual(Task.objects.count(), 0)

    def test_invalid_priority(self):
        response = self._send('post', '/api/tasks', self.admin, self._payload(priority='Urgent'))
        self.assertEqual(response.status_code, 400)

    def test_missing_title_is_rejected(self):
        payload = self._payload()
        del payload['title']
        response = self._send('post', '/api/tasks', self.admin, payload)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Invalid request')


class ListTasksAPITest(TaskAPITestBase):

    def setUp(self):
        super().setUp()
        self.later = self._create_task(title='Later', due_date=self.due + timedelta(days=2))
        self.sooner = self._create_task(title='Sooner')
        self.done = self._create_task(
            title='Done', due_date=self.due + timedelta(days=1),
            status=TaskStatus.COMPLETED, progress=100, assignees=[self.teammate],
        )
        Task.objects.create(
            admin=self.other_admin, created_by=self.other_admin, title='Foreign', due_date=self.due,
        )

    def test_admin_sees_whole_tenant(self):
        response = self.client.get('/api/tasks', **auth_header(self.admin))
        self.assertEqual(response.status_code, 200)

        data = response.json()
        self.assertEqual([t['title'] for t in data['tasks']], ['Sooner', 'Done', 'Later'])
        self.assertEqual(data['status_summary'], {
            'all': 3,
            'pending_tasks': 2,
            'in_progress_tasks': 0,
            'completed_tasks': 1,
        })

    def test_member_sees_only_assigned(self):
        response = self.client.get('/api/tasks', **auth_header(self.member))
        data = response.json()
        self.assertEqual([t['title'] for t in data['tasks']], ['Sooner', 'Later'])
        self.assertEqual(data['status_summary']['all'], 2)

    def test_status_filter_keeps_full_summary(self):
        response = self.client.get('/api/tasks?status=Completed', **auth_header(self.admin))
        data = response.json()
        self.assertEqual([t['title'] for t in data['tasks']], ['Done'])
        self.assertEqual(data['status_summary']['all'], 3)

    def test_list_requires_auth(self):
        response = self.client.get('/api/tasks')
        self.assertEqual(response.status_code, 401)


class TaskDetailAPITest(TaskAPITestBase):

    def setUp(self):
        super().setUp()
        self.task = self._create_task(todo_checklist=[
            {'text': 'One', 'completed': False},
            {'text': 'Two', 'completed': False},
        ])

    def test_get_task_in_tenant(self):
        response = self.client.get(f'/api/tasks/{self.task.id}', **auth_header(self.teammate))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['title'], 'Write report')

    def test_get_task_of_other_tenant(self):
        response = self.client.get(f'/api/tasks/{self.task.id}', **auth_header(self.outsider))
        self.assertEqual(response.status_code, 403)

    def test_get_unknown_task(self):
        response = self.client.get(
            '/api/tasks/00000000-0000-0000-0000-000000000000', **auth_header(self.admin)
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()['message'], 'Task not found')

    def test_update_keeps_omitted_fields(self):
        response = self._send('put', f'/api/tasks/{self.task.id}', self.admin, {'title': 'Renamed'})
        self.assertEqual(response.status_code, 200)

        self.task.refresh_from_db()
        self.assertEqual(self.task.title, 'Renamed')
        self.assertEqual(list(self.task.assigned_to.all()), [self.member])
        self.assertEqual(len(self.task.todo_checklist), 2)

    def test_update_replaces_assignees(self):
        response = self._send(
            'put', f'/api/tasks/{self.task.id}', self.admin,
            {'assigned_to': [str(self.teammate.id)]},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(list(self.task.assigned_to.all()), [self.teammate])

    def test_member_cannot_update_or_delete(self):
        response = self._send('put', f'/api/tasks/{self.task.id}', self.member, {'title': 'X'})
        self.assertEqual(response.status_code, 403)

        response = self.client.delete(f'/api/tasks/{self.task.id}', **auth_header(self.member))
        self.assertEqual(response.status_code, 403)
        self.assertTrue(Task.objects.filter(id=self.task.id).exists())

    def test_other_admin_cannot_delete(self):
        response = self.client.delete(f'/api/tasks/{self.task.id}', **auth_header(self.other_admin))
        self.assertEqual(response.status_code, 403)

    def test_admin_deletes_task(self):
        response = self.client.delete(f'/api/tasks/{self.task.id}', **auth_header(self.admin))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['message'], 'Task deleted successfully')
        self.assertFalse(Task.objects.filter(id=self.task.id).exists())


class TaskProgressAPITest(TaskAPITestBase):

    def setUp(self):
        super().setUp()
        self.task = self._create_task(todo_checklist=[
            {'text': 'One', 'completed': False},
            {'text': 'Two', 'completed': False},
        ])

    def _checklist(self, user, *flags):
        return self._send(
            'patch', f'/api/tasks/{self.task.id}/checklist', user,
            {'todo_checklist': [
                {'text': text, 'completed': done} for text, done in zip(['One', 'Two'], flags)
            ]},
        )

    def test_checklist_updates_progress_and_status(self):
        data = self._checklist(self.member, False, False).json()['task']
        self.assertEqual((data['progress'], data['status']), (0, 'Pending'))

        data = self._checklist(self.member, True, False).json()['task']
        self.assertEqual((data['progress'], data['status']), (50, 'In Progress'))

        data = self._checklist(self.member, True, True).json()['task']
        self.assertEqual((data['progress'], data['status']), (100, 'Completed'))

    def test_unassigned_member_cannot_update_checklist(self):
        response = self._checklist(self.teammate, True, True)
        self.assertEqual(response.status_code, 403)

    def test_completing_marks_every_item_done(self):
        response = self._send(
            'patch', f'/api/tasks/{self.task.id}/status', self.member, {'status': 'Completed'}
        )
        self.assertEqual(response.status_code, 200)

        task = response.json()['task']
        self.assertEqual(task['progress'], 100)
        self.assertTrue(all(item['completed'] for item in task['todo_checklist']))

    def test_other_status_leaves_checklist(self):
        response = self._send(
            'patch', f'/api/tasks/{self.task.id}/status', self.admin, {'status': 'In Progress'}
        )
        task = response.json()['task']
        self.assertEqual(task['status'], 'In Progress')
        self.assertEqual(task['progress'], 0)
        self.assertFalse(any(item['completed'] for item in task['todo_checklist']))

    def test_invalid_status(self):
        response = self._send(
            'patch', f'/api/tasks/{self.task.id}/status', self.admin, {'status': 'Archived'}
        )
        self.assertEqual(response.status_code, 400)
