import decimal

import django.core.validators
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='BagPrice',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('amount', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(decimal.Decimal('0.01'))])),
                ('label', models.CharField(blank=True, default='', max_length=100)),
                ('sort_order', models.IntegerField(default=0)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['sort_order', 'pk'],
            },
        ),
        migrations.CreateModel(
            name='MaterialPrice',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('type', models.CharField(choices=[('sachet_roll', 'Sachet roll'), ('packing_nylon', 'Packing nylon')], max_length=20)),
                ('cost', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(decimal.Decimal('0'))])),
                ('bags_per_unit', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('label', models.CharField(blank=True, default='', max_length=100)),
                ('sort_order', models.IntegerField(default=0)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['type', 'sort_order', 'pk'],
            },
        ),
        migrations.CreateModel(
            name='Settings',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('sachet_roll_cost', models.DecimalField(decimal_places=2, default=decimal.Decimal('31000.00'), help_text='Cost of one sachet roll.', max_digits=12, validators=[django.core.validators.MinValueValidator(decimal.Decimal('0'))])),
                ('sachet_roll_bags_per_roll', models.PositiveIntegerField(default=450, help_text='Bags produced from one sachet roll.', validators=[django.core.validators.MinValueValidator(1)])),
                ('packing_nylon_cost', models.DecimalField(decimal_places=2, default=decimal.Decimal('100000.00'), help_text='Cost of one packing nylon package.', max_digits=12, validators=[django.core.validators.MinValueValidator(decimal.Decimal('0'))])),
                ('packing_nylon_bags_per_package', models.PositiveIntegerField(default=10000, help_text='Bags packed from one nylon package.', validators=[django.core.validators.MinValueValidator(1)])),
                ('sales_price_1', models.DecimalField(decimal_places=2, default=decimal.Decimal('250.00'), max_digits=10, validators=[django.core.validators.MinValueValidator(decimal.Decimal('0'))])),
                ('sales_price_2', models.DecimalField(decimal_places=2, default=decimal.Decimal('270.00'), max_digits=10, validators=[django.core.validators.MinValueValidator(decimal.Decimal('0'))])),
                ('inventory_low_threshold', models.PositiveIntegerField(default=4000, help_text='Remaining bags below which a restock is flagged.')),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'settings',
                'verbose_name_plural': 'settings',
            },
        ),
    ]
