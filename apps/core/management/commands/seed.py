from datetime import timedelta
from django.utils import timezone
from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model
from apps.identity.models import UserRole
from apps.tasks.models import Task, TaskPriority
from apps.tasks.progress import apply_checklist
from apps.comments.models import Comment

User = get_user_model()

SEED_PASSWORD = "password123"

MEMBERS = [
    ('Dana Reyes', 'dana@example.com'),
    ('Sam Ortiz', 'sam@example.com'),
    ('Lee Tan', 'lee@example.com'),
]

TASKS = [
    {
        'title': 'Prepare quarterly report',
        'priority': TaskPriority.HIGH,
        'due_in_days': 3,
        'assignees': [0, 1],
        'checklist': [
            ('Collect figures', True),
            ('Draft summary', False),
        ],
    },
    {
        'title': 'Update onboarding docs',
        'priority': TaskPriority.MEDIUM,
        'due_in_days': 7,
        'assignees': [2],
        'checklist': [
            ('Review current docs', False),
            ('Add setup section', False),
            ('Publish', False),
        ],
    },
    {
        'title': 'Renew domain certificates',
        'priority': TaskPriority.LOW,
        'due_in_days': -2,
        'assignees': [1],
        'checklist': [
            ('Request certificate', True),
            ('Install certificate', True),
        ],
    },
]


class Command(BaseCommand):
    help = 'Seeds the database with an admin, a team and sample tasks.'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clean',
            action='store_true',
            help='Delete existing data before seeding',
        )
        parser.add_argument(
            '--users',
            action='store_true',
            help='Seed the admin and members only',
        )

    def handle(self, *args, **options):
        if options['clean']:
            self.stdout.write(self.style.WARNING('Cleaning database...'))
            self._clean_database()
            self.stdout.write(self.style.SUCCESS('Database cleaned.'))

        admin = self._seed_admin()
        members = self._seed_members(admin)

        if not options['users']:
            self._seed_tasks(admin, members)

        self.stdout.write(self.style.SUCCESS('Seeding completed successfully.'))
        self.stdout.write(f'Admin invite token: {admin.admin_invite_token}')

    def _clean_database(self):
        Comment.objects.all().delete()
        Task.objects.all().delete()
        User.objects.exclude(is_superuser=True).delete()

    def _seed_admin(self):
        self.stdout.write('Seeding admin...')
        admin = User.objects.filter(email='admin@example.com').first()
        if admin is None:
            admin = User.objects.create_user(
                username='admin@example.com',
                email='admin@example.com',
                password=SEED_PASSWORD,
                name='Team Admin',
                role=UserRole.ADMIN,
            )
            self.stdout.write(f' - Created admin@example.com ({SEED_PASSWORD})')
        else:
            self.stdout.write(' - Using existing admin@example.com')
        return admin

    def _seed_members(self, admin):
        self.stdout.write('Seeding members...')
        members = []
        for name, email in MEMBERS:
            member = User.objects.filter(email=email).first()
            if member is None:
                member = User.objects.create_user(
                    username=email,
                    email=email,
                    password=SEED_PASSWORD,
                    name=name,
                    role=UserRole.MEMBER,
                    admin=admin,
                )
                self.stdout.write(f' - Created {email}')
            members.append(member)
        return members

    def _seed_tasks(self, admin, members):
        self.stdout.write('Seeding tasks...')
        now = timezone.now()
        for entry in TASKS:
            if Task.objects.filter(admin=admin, title=entry['title']).exists():
                continue
            task = Task(
                admin=admin,
                created_by=admin,
                title=entry['title'],
                priority=entry['priority'],
                due_date=now + timedelta(days=entry['due_in_days']),
            )
            apply_checklist(task, [
                {'text': text, 'completed': done} for text, done in entry['checklist']
            ])
            task.save()
            task.assigned_to.set([members[i] for i in entry['assignees']])
            self.stdout.write(f' - {task.title} ({task.status}, {task.progress}%)')
