# applications/migrations/0001_initial.py
#
# Enrollment applications (`enrollment_applications`) with their embedded
# student / parent / document JSON.

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='EnrollmentApplication',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('course_ids', models.JSONField(default=list, help_text='Courses requested (a single course in the current form).')),
                ('notes', models.TextField(blank=True)),
                ('files', models.JSONField(blank=True, default=list)),
                ('parent_info', models.JSONField(blank=True, default=dict)),
                ('student_info', models.JSONField(blank=True, default=dict)),
                ('status', models.CharField(
                    choices=[('submitted', 'Submitted'), ('approved', 'Approved'), ('rejected', 'Rejected')],
                    db_index=True,
                    default='submitted',
                    max_length=20,
                )),
                ('submitted_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('processed_at', models.DateTimeField(blank=True, null=True)),
                ('processed_by', models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name='processed_applications',
                    to=settings.AUTH_USER_MODEL,
                )),
                ('user', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='enrollment_applications',
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                'verbose_name': 'Enrollment Application',
                'verbose_name_plural': 'Enrollment Applications',
                'db_table': 'enrollment_applications',
                'ordering': ['-submitted_at', '-id'],
            },
        ),
    ]
