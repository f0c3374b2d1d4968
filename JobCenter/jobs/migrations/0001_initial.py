import django.core.serializers.json
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


STATUS_CHOICES = [
    (1, 'New'), (2, 'Assigned'), (3, 'Setup'), (4, 'FPQC'), (5, 'In Process'), (6, 'Paused'),
    (7, 'Breakdown'), (8, 'On Hold'), (9, 'LPQC'), (10, 'Complete'), (12, 'QC Hold'), (13, 'QC Check'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('planning', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Operation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('lot_number', models.CharField(blank=True, max_length=50)),
                ('item_code', models.CharField(blank=True, max_length=50)),
                ('planned_date', models.DateField(blank=True, null=True)),
                ('shift', models.CharField(blank=True, choices=[('A', 'Shift A'), ('B', 'Shift B'), ('C', 'Shift C')], max_length=1)),
                ('sequence', models.PositiveIntegerField(default=0)),
                ('estimated_minutes', models.PositiveIntegerField(blank=True, null=True)),
                ('status', models.PositiveSmallIntegerField(choices=STATUS_CHOICES, default=1)),
                ('hold_flag', models.PositiveSmallIntegerField(blank=True, choices=STATUS_CHOICES, null=True)),
                ('pause_reason', models.PositiveSmallIntegerField(blank=True, choices=[(1, 'Break'), (2, 'Material shortage'), (3, 'Tool change'), (4, 'Quality issue'), (5, 'Other')], null=True)),
                ('planned_quantity', models.PositiveIntegerField(default=0)),
                ('actual_quantity', models.PositiveIntegerField(default=0)),
                ('reject_quantity', models.PositiveIntegerField(default=0)),
                ('completion_percent', models.FloatField(blank=True, null=True)),
                ('message', models.CharField(blank=True, max_length=100)),
                ('remarks', models.CharField(blank=True, max_length=255)),
                ('started_at', models.DateTimeField(blank=True, null=True)),
                ('ended_at', models.DateTimeField(blank=True, null=True)),
                ('paused_at', models.DateTimeField(blank=True, null=True)),
                ('resumed_at', models.DateTimeField(blank=True, null=True)),
                ('breakdown_at', models.DateTimeField(blank=True, null=True)),
                ('qc_requested_at', models.DateTimeField(blank=True, null=True)),
                ('total_pause_minutes', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('machine', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='operations', to='planning.machine')),
            ],
            options={
                'verbose_name': 'Operation',
                'verbose_name_plural': 'Operations',
                'ordering': ['machine_id', 'planned_date', 'shift', 'sequence', 'id'],
                'indexes': [
                    models.Index(fields=['machine', 'planned_date', 'shift', 'sequence'], name='jobs_operation_queue_idx'),
                    models.Index(fields=['status'], name='jobs_operation_status_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ActionRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(max_length=20)),
                ('operator', models.CharField(max_length=150)),
                ('performed_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('from_status', models.PositiveSmallIntegerField(choices=STATUS_CHOICES)),
                ('to_status', models.PositiveSmallIntegerField(choices=STATUS_CHOICES)),
                ('details', models.JSONField(blank=True, default=dict, encoder=django.core.serializers.json.DjangoJSONEncoder)),
                ('operation', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='actions', to='jobs.operation')),
            ],
            options={
                'verbose_name': 'Action record',
                'verbose_name_plural': 'Action records',
                'ordering': ['-performed_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='Notification',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('message', models.TextField()),
                ('target', models.PositiveSmallIntegerField(choices=[(0, 'All'), (1, 'Supervisors'), (2, 'QC'), (3, 'Maintenance')], default=0)),
                ('source_type', models.CharField(default='operations', max_length=30)),
                ('source_id', models.PositiveBigIntegerField()),
                ('category', models.CharField(max_length=30)),
                ('priority', models.PositiveSmallIntegerField(choices=[(0, 'Normal'), (1, 'Critical'), (2, 'High')], default=0)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
            ],
            options={
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='QualityCheck',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('kind', models.CharField(choices=[('fpqc', 'First piece QC'), ('qc_check', 'QC check request')], max_length=10)),
                ('revision', models.PositiveIntegerField(default=1)),
                ('actual_quantity', models.PositiveIntegerField(blank=True, null=True)),
                ('qc_quantity', models.PositiveIntegerField(blank=True, null=True)),
                ('reject_quantity', models.PositiveIntegerField(blank=True, null=True)),
                ('nc_quantity', models.PositiveIntegerField(blank=True, null=True)),
                ('message', models.CharField(blank=True, max_length=100)),
                ('reason', models.CharField(blank=True, max_length=255)),
                ('remarks', models.CharField(blank=True, max_length=255)),
                ('requested_by', models.CharField(max_length=150)),
                ('requested_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('operation', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='quality_checks', to='jobs.operation')),
            ],
            options={
                'ordering': ['operation_id', 'kind', 'revision'],
                'constraints': [
                    models.UniqueConstraint(fields=('operation', 'kind', 'revision'), name='unique_quality_check_revision'),
                ],
            },
        ),
        migrations.CreateModel(
            name='QualityTest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('test_type', models.CharField(choices=[('dimensional', 'Dimensional'), ('surface_finish', 'Surface finish'), ('hardness', 'Hardness'), ('visual', 'Visual'), ('functional', 'Functional'), ('torque', 'Torque'), ('pressure', 'Pressure'), ('temperature', 'Temperature'), ('other', 'Other')], max_length=20)),
                ('test_value', models.DecimalField(decimal_places=4, max_digits=12)),
                ('test_unit', models.CharField(choices=[('mm', 'mm'), ('in', 'in'), ('um', 'um'), ('mil', 'mil'), ('kg', 'kg'), ('lb', 'lb'), ('N', 'N'), ('Nm', 'Nm'), ('psi', 'psi'), ('bar', 'bar'), ('C', 'C'), ('F', 'F'), ('HRC', 'HRC'), ('HRB', 'HRB'), ('Ra', 'Ra'), ('count', 'count')], max_length=10)),
                ('result', models.CharField(choices=[('pass', 'Pass'), ('fail', 'Fail')], max_length=4)),
                ('recorded_by', models.CharField(max_length=150)),
                ('recorded_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('operation', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='quality_tests', to='jobs.operation')),
            ],
            options={
                'ordering': ['-recorded_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='Alert',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('issue_type', models.CharField(max_length=50)),
                ('severity', models.CharField(choices=[('low', 'Low'), ('medium', 'Medium'), ('high', 'High'), ('critical', 'Critical')], max_length=10)),
                ('description', models.TextField(max_length=500)),
                ('status', models.CharField(choices=[('open', 'Open'), ('acknowledged', 'Acknowledged'), ('resolved', 'Resolved')], default='open', max_length=15)),
                ('raised_by', models.CharField(max_length=150)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('operation', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='alerts', to='jobs.operation')),
            ],
            options={
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='ContactRequest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('issue_type', models.CharField(choices=[('production', 'Production'), ('quality', 'Quality'), ('material', 'Material'), ('technical', 'Technical'), ('emergency', 'Emergency'), ('other', 'Other')], max_length=20)),
                ('message', models.TextField(max_length=500)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('answered', 'Answered')], default='pending', max_length=10)),
                ('requested_by', models.CharField(max_length=150)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('operation', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='contact_requests', to='jobs.operation')),
            ],
            options={
                'ordering': ['-created_at', '-id'],
            },
        ),
    ]
