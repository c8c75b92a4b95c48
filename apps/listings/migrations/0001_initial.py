# Generated manually for the ReWear listings app

import uuid
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Listing',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=200)),
                ('description', models.TextField()),
                ('category', models.CharField(choices=[('Tops', 'Tops'), ('Bottoms', 'Bottoms'), ('Dresses', 'Dresses'), ('Outerwear', 'Outerwear'), ('Accessories', 'Accessories'), ('Footwear', 'Footwear')], max_length=20)),
                ('garment_type', models.CharField(max_length=100)),
                ('size', models.CharField(max_length=50)),
                ('condition', models.CharField(choices=[('New with tags', 'New with tags'), ('Excellent', 'Excellent'), ('Good', 'Good'), ('Fair', 'Fair')], max_length=20)),
                ('tags', models.JSONField(blank=True, default=list)),
                ('images', models.JSONField(blank=True, default=list)),
                ('points_value', models.PositiveIntegerField(blank=True, null=True, validators=[MinValueValidator(0)])),
                ('status', models.CharField(choices=[('available', 'Available'), ('pending_swap', 'Pending swap'), ('swapped', 'Swapped'), ('redeemed', 'Redeemed'), ('rejected', 'Rejected')], default='available', editable=False, max_length=20)),
                ('version', models.PositiveIntegerField(default=0, editable=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='listings', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'listings',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status', 'created_at'], name='listings_status_idx'),
                    models.Index(fields=['owner', 'created_at'], name='listings_owner_idx'),
                    models.Index(fields=['category', 'status'], name='listings_category_idx'),
                ],
            },
        ),
    ]
