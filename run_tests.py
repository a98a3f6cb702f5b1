#!/usr/bin/env python
"""
Test runner script for the full gateway suite
Usage: python run_tests.py
"""
import os
import sys
import django
from django.conf import settings
from django.test.utils import get_runner

if __name__ == "__main__":
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'backend.config.settings')
    django.setup()
    TestRunner = get_runner(settings)
    test_runner = TestRunner()
    failures = test_runner.run_tests([
        'backend.core',
        'backend.clients',
        'backend.artists',
        'backend.schools',
        'backend.galleries',
        'backend.items',
        'backend.auctions',
        'backend.consignments',
        'backend.invoices',
        'backend.banking',
        'backend.refunds',
        'backend.reimbursements',
        'backend.logistics',
        'backend.payments',
        'backend.brands',
    ])
    sys.exit(bool(failures))
