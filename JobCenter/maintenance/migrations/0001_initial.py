import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('jobs', '0001_initial'),
        ('planning', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='MaintenanceTicket',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('description', models.CharField(max_length=200)),
                ('opened_by', models.CharField(max_length=150)),
                ('status', models.CharField(choices=[('open', 'Open'), ('closed', 'Closed')], default='open', max_length=10)),
                ('opened_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('closed_at', models.DateTimeField(blank=True, null=True)),
                ('closed_by', models.CharField(blank=True, max_length=150)),
                ('resolution', models.CharField(blank=True, max_length=255)),
                ('machine', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='maintenance_tickets', to='planning.machine')),
                ('operation', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='maintenance_tickets', to='jobs.operation')),
            ],
            options={
                'verbose_name': 'Maintenance ticket',
                'verbose_name_plural': 'Maintenance tickets',
                'ordering': ['-opened_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='DowntimeRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('kind', models.CharField(choices=[('pause', 'Pause'), ('breakdown', 'Breakdown')], max_length=10)),
                ('reason', models.CharField(blank=True, max_length=255)),
                ('lot_number', models.CharField(blank=True, max_length=50)),
                ('item_code', models.CharField(blank=True, max_length=50)),
                ('started_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('ended_at', models.DateTimeField(blank=True, null=True)),
                ('recorded_by', models.CharField(max_length=150)),
                ('machine', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='downtimes', to='planning.machine')),
                ('operation', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='downtimes', to='jobs.operation')),
                ('ticket', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='downtimes', to='maintenance.maintenanceticket')),
            ],
            options={
                'verbose_name': 'Downtime record',
                'verbose_name_plural': 'Downtime records',
                'ordering': ['-started_at', '-id'],
                'indexes': [
                    models.Index(fields=['operation', 'kind', 'ended_at'], name='maintenance_open_downtime_idx'),
                ],
            },
        ),
    ]
