# Generated migration for legalization app - requests, work days, entries, audit logs

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Request',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('applicant_name', models.CharField(max_length=191, validators=[django.core.validators.MinLengthValidator(2)])),
                ('month', models.CharField(help_text='YYYY-MM', max_length=7, validators=[django.core.validators.RegexValidator(code='invalid_month', message='Month must be in YYYY-MM format', regex='^\\d{4}-(0[1-9]|1[0-2])$')])),
                ('planned_count', models.PositiveIntegerField()),
                ('application_number', models.CharField(blank=True, default='', max_length=100)),
                ('submitted_on', models.DateField(blank=True, null=True)),
                ('planned_small', models.PositiveIntegerField(blank=True, null=True)),
                ('planned_large', models.PositiveIntegerField(blank=True, null=True)),
                ('planned_coupled', models.PositiveIntegerField(blank=True, null=True)),
                ('notes', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Request',
                'verbose_name_plural': 'Requests',
                'db_table': 'requests',
                'ordering': ['-id'],
                'indexes': [models.Index(fields=['month'], name='idx_request_month')],
            },
        ),
        migrations.CreateModel(
            name='WorkDay',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField(unique=True)),
                ('is_open', models.BooleanField(default=True)),
                ('notes', models.TextField(blank=True, default='')),
            ],
            options={
                'verbose_name': 'Work Day',
                'verbose_name_plural': 'Work Days',
                'db_table': 'work_days',
                'ordering': ['-date'],
            },
        ),
        migrations.CreateModel(
            name='Entry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('count_small', models.PositiveIntegerField(default=0)),
                ('count_large', models.PositiveIntegerField(default=0)),
                ('count_coupled', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('inspector', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='entries', to=settings.AUTH_USER_MODEL)),
                ('request', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='entries', to='legalization.request')),
                ('work_day', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='entries', to='legalization.workday')),
            ],
            options={
                'verbose_name': 'Entry',
                'verbose_name_plural': 'Entries',
                'db_table': 'entries',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['request', 'inspector'], name='idx_entry_request_inspector'),
                    models.Index(fields=['created_at'], name='idx_entry_created'),
                ],
            },
        ),
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('entity_type', models.CharField(max_length=50)),
                ('entity_id', models.IntegerField()),
                ('prev', models.TextField(blank=True, null=True)),
                ('next', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('actor', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='audit_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Audit Log',
                'verbose_name_plural': 'Audit Logs',
                'db_table': 'audit_logs',
                'ordering': ['-created_at'],
            },
        ),
    ]
