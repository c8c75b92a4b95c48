"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_data

This creates:
- 4 users (admin, alice, bob, charlie)
- Starting points for the members
- 8 listings across categories, some swap-only
- An open swap request
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.accounts.models import User, UserRole
from apps.common.apps import get_gateway
from apps.exchange.models import PointsAccount, PointsEntry, SwapRequest
from apps.exchange.services import ExchangeLedger, credit
from apps.listings.models import Listing, Category, Condition
from apps.listings.services import create_listing


SAMPLE_LISTINGS = [
    # (owner, title, category, garment_type, size, condition, tags, points_value)
    ('alice', 'Vintage Denim Jacket', Category.OUTERWEAR, 'Jacket', 'M', Condition.EXCELLENT, 'vintage, denim, blue', 120),
    ('alice', 'Floral Summer Dress', Category.DRESSES, 'Midi dress', 'S', Condition.GOOD, 'floral, summer', 80),
    ('alice', 'Wool Beanie', Category.ACCESSORIES, 'Hat', 'One size', Condition.NEW_WITH_TAGS, 'wool, winter', None),
    ('bob', 'Organic Cotton Tee', Category.TOPS, 'T-Shirt', 'L', Condition.GOOD, 'organic, basics', 30),
    ('bob', 'Slim Chinos', Category.BOTTOMS, 'Trousers', '32/32', Condition.EXCELLENT, 'office, beige', 60),
    ('bob', 'Leather Chelsea Boots', Category.FOOTWEAR, 'Boots', 'EU 43', Condition.FAIR, 'leather, brown', None),
    ('charlie', 'Oversized Knit Sweater', Category.TOPS, 'Sweater', 'XL', Condition.EXCELLENT, 'knit, cozy, winter', 90),
    ('charlie', 'Rain Shell', Category.OUTERWEAR, 'Jacket', 'M', Condition.NEW_WITH_TAGS, 'waterproof, hiking', 150),
]

STARTING_POINTS = {
    'alice': 200,
    'bob': 100,
    'charlie': 50,
}


class Command(BaseCommand):
    help = 'Create sample data for trying out the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before creating new sample data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        gateway = get_gateway()

        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        users = self.create_users()
        self.grant_points(gateway, users)
        listings = self.create_listings(gateway, users)
        self.create_swap_requests(gateway, users, listings)

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Test accounts:')
        self.stdout.write('  admin@example.com / admin123 (admin)')
        self.stdout.write('  alice@example.com / password123')
        self.stdout.write('  bob@example.com / password123')
        self.stdout.write('  charlie@example.com / password123')

    def clear_data(self):
        """Clear all marketplace data from the database."""
        SwapRequest.objects.all().delete()
        PointsEntry.objects.all().delete()
        PointsAccount.objects.all().delete()
        Listing.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()
        User.objects.filter(email='admin@example.com').delete()

    def create_users(self):
        """Create test users."""
        self.stdout.write('  Creating users...')

        admin, _ = User.objects.get_or_create(
            email='admin@example.com',
            defaults={
                'display_name': 'Admin User',
                'role': UserRole.ADMIN,
                'is_staff': True,
                'is_superuser': True,
            }
        )
        admin.set_password('admin123')
        admin.save()

        users = {'admin': admin}
        for key, display_name in [
            ('alice', 'Alice Thrift'),
            ('bob', 'Bob Upcycle'),
            ('charlie', 'Charlie Closet'),
        ]:
            user, _ = User.objects.get_or_create(
                email=f'{key}@example.com',
                defaults={'display_name': display_name}
            )
            user.set_password('password123')
            user.save()
            users[key] = user

        return users

    def grant_points(self, gateway, users):
        """Give members a starting balance through the points service."""
        self.stdout.write('  Granting points...')

        for key, amount in STARTING_POINTS.items():
            credit(
                gateway,
                user_id=users[key].id,
                amount=amount,
                granted_by=users['admin'],
                note='Welcome bonus',
            )

    def create_listings(self, gateway, users):
        """Create sample listings."""
        self.stdout.write('  Creating listings...')

        listings = []
        for owner, title, category, garment_type, size, condition, tags, points_value in SAMPLE_LISTINGS:
            listings.append(create_listing(
                gateway,
                owner=users[owner],
                title=title,
                description=f'{title} in {condition.label.lower()} condition. Looking for a new home.',
                category=category,
                garment_type=garment_type,
                size=size,
                condition=condition,
                tags=tags,
                points_value=points_value,
            ))

        return listings

    def create_swap_requests(self, gateway, users, listings):
        """Bob asks Alice to swap for her denim jacket."""
        self.stdout.write('  Creating swap requests...')

        ExchangeLedger(gateway).request_swap(
            listings[0].id,
            users['bob'],
            message='Would swap for my chinos!',
        )
