# Generated manually for the repair billing schema

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('repairs', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('entity_type', models.CharField(max_length=50)),
                ('entity_id', models.CharField(max_length=64)),
                ('action', models.CharField(choices=[('PAYMENT_RECEIVED', 'Payment received')], max_length=50)),
                ('metadata', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('actor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='audit_entries', to=settings.AUTH_USER_MODEL)),
                ('repair', models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='audit_entries', to='repairs.repair')),
            ],
            options={
                'db_table': 'audit_logs',
                'ordering': ['created_at', 'id'],
                'indexes': [
                    models.Index(fields=['entity_type', 'entity_id'], name='audit_logs_entity__9f3b12_idx'),
                    models.Index(fields=['action', 'created_at'], name='audit_logs_action_4c8e07_idx'),
                ],
            },
        ),
    ]
