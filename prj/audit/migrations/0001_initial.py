# audit/migrations/0001_initial.py
#
# System log (`system_logs`).

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
            name='SystemLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('level', models.CharField(
                    choices=[('debug', 'Debug'), ('info', 'Info'), ('warning', 'Warning'), ('error', 'Error')],
                    default='info',
                    max_length=10,
                )),
                ('message', models.TextField()),
                ('context', models.TextField(blank=True, help_text='Free-form details (JSON or key=value pairs).')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('user', models.ForeignKey(
                    blank=True,
                    help_text='The user who triggered the event, if any.',
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name='system_logs',
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                'verbose_name': 'System Log',
                'verbose_name_plural': 'System Logs',
                'db_table': 'system_logs',
                'ordering': ['-created_at', '-id'],
            },
        ),
    ]
