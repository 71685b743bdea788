# Generated manually for the repair billing schema

import uuid
from decimal import Decimal
from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('customers', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Repair',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('status', models.CharField(choices=[('RECEIVED', 'Received'), ('IN_PROGRESS', 'In progress'), ('WAITING_PARTS', 'Waiting for parts'), ('REPAIRED', 'Repaired'), ('UNREPAIRABLE', 'Unrepairable'), ('DELIVERED', 'Delivered')], default='RECEIVED', max_length=20)),
                ('device_description', models.CharField(blank=True, max_length=200)),
                ('total_charges', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('is_locked', models.BooleanField(default=False)),
                ('staff_share_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('shop_share_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('assigned_to', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='assigned_repairs', to=settings.AUTH_USER_MODEL)),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='repairs', to='customers.customer')),
            ],
            options={
                'db_table': 'repairs',
                'ordering': ['created_at', 'id'],
                'indexes': [
                    models.Index(fields=['customer', 'status', 'created_at'], name='repairs_custome_5c7d21_idx'),
                    models.Index(fields=['is_locked'], name='repairs_is_lock_0b9e44_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='RepairCharge',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('description', models.CharField(max_length=255)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('repair', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='charges', to='repairs.repair')),
            ],
            options={
                'db_table': 'repair_charges',
                'ordering': ['created_at'],
            },
        ),
    ]
