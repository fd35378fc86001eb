# courses/migrations/0001_initial.py
#
# Course catalog (`courses`) and enrollment registry (`enrollments`), with the
# one-enrollment-per-(user, course) constraint.

import django.core.validators
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
            name='Course',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('course_code', models.CharField(help_text="Short unique code, e.g. 'CS101'.", max_length=20, unique=True)),
                ('course_name', models.CharField(max_length=200)),
                ('credits', models.PositiveIntegerField(
                    help_text='Credit units; the default fee is credits × fee per credit.',
                    validators=[django.core.validators.MinValueValidator(1)],
                )),
                ('description', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                'verbose_name': 'Course',
                'verbose_name_plural': 'Courses',
                'db_table': 'courses',
                'ordering': ['course_name'],
            },
        ),
        migrations.CreateModel(
            name='Enrollment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('enrolled_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('course', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='enrollments',
                    to='courses.course',
                )),
                ('user', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='enrollments',
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                'verbose_name': 'Enrollment',
                'verbose_name_plural': 'Enrollments',
                'db_table': 'enrollments',
                'ordering': ['-enrolled_at'],
                'constraints': [
                    models.UniqueConstraint(fields=('user', 'course'), name='unique_enrollment_per_course'),
                ],
            },
        ),
    ]
