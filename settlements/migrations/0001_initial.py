import decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('ledger', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='ReceptionistSale',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField(default=django.utils.timezone.localdate)),
                ('driver_name', models.CharField(blank=True, default='', max_length=120)),
                ('sale_type', models.CharField(choices=[('driver', 'Driver'), ('general', 'General'), ('mini_store', 'Mini store')], default='driver', max_length=12)),
                ('bags_at_price_1', models.PositiveIntegerField(default=0)),
                ('bags_at_price_2', models.PositiveIntegerField(default=0)),
                ('total_bags', models.PositiveIntegerField(default=0)),
                ('price_breakdown', models.JSONField(blank=True, default=list)),
                ('expected_amount', models.DecimalField(decimal_places=2, default=decimal.Decimal('0.00'), max_digits=12, validators=[django.core.validators.MinValueValidator(decimal.Decimal('0'))])),
                ('submitted_by', models.BigIntegerField(help_text='Id of the user who recorded the sale.')),
                ('is_submitted', models.BooleanField(default=False)),
                ('submitted_at', models.DateTimeField(blank=True, null=True)),
                ('notes', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('driver', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='receptionist_sales', to='ledger.employee')),
            ],
            options={
                'ordering': ['-date', '-pk'],
            },
        ),
        migrations.CreateModel(
            name='StorekeeperEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField(default=django.utils.timezone.localdate)),
                ('entry_type', models.CharField(choices=[('driver_pickup', 'Driver pickup'), ('general_sales', 'General sales'), ('packer_production', 'Packer production'), ('ministore_pickup', 'Mini store pickup')], max_length=20)),
                ('driver_name', models.CharField(blank=True, default='', max_length=120)),
                ('packer_name', models.CharField(blank=True, default='', max_length=120)),
                ('bags_count', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('submitted_by', models.BigIntegerField()),
                ('is_submitted', models.BooleanField(default=False)),
                ('notes', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('driver', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='storekeeper_pickups', to='ledger.employee')),
                ('packer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='storekeeper_production', to='ledger.employee')),
            ],
            options={
                'verbose_name_plural': 'storekeeper entries',
                'ordering': ['-date', '-pk'],
            },
        ),
        migrations.CreateModel(
            name='Settlement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField(default=django.utils.timezone.localdate)),
                ('expected_amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(decimal.Decimal('0'))])),
                ('settled_amount', models.DecimalField(decimal_places=2, default=decimal.Decimal('0.00'), max_digits=12)),
                ('remaining_balance', models.DecimalField(decimal_places=2, default=decimal.Decimal('0.00'), max_digits=12)),
                ('is_settled', models.BooleanField(default=False)),
                ('settled_by', models.BigIntegerField()),
                ('settled_at', models.DateTimeField(blank=True, null=True)),
                ('notes', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('receptionist_sale', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='settlement', to='settlements.receptionistsale')),
            ],
            options={
                'ordering': ['-date', '-pk'],
            },
        ),
        migrations.CreateModel(
            name='SettlementPayment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(decimal.Decimal('0.01'))])),
                ('paid_by', models.BigIntegerField()),
                ('paid_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('notes', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('settlement', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='settlements.settlement')),
            ],
            options={
                'ordering': ['paid_at', 'pk'],
            },
        ),
    ]
