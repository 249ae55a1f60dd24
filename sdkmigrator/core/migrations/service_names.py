# -----------------------------------------------------------------------------
# sdkmigrator - Dual Licensed Software
# Copyright (c) 2025 Adem Can
#
# This file is part of sdkmigrator.
#
# sdkmigrator is available under a dual-license:
#   1. AGPLv3 (Affero General Public License v3)
#      - See LICENSE.txt and LICENSE-AGPL.txt
#      - Online: https://www.gnu.org/licenses/agpl-3.0.html
#
#   2. Commercial License
#      - For proprietary or revenue-generating use,
#        including SaaS, embedding in closed-source software,
#        or avoiding AGPL obligations.
#      - See LICENSE.txt and COMMERCIAL-LICENSE.txt
#      - Contact: ademfcan@gmail.com
#
# By using this file, you agree to the terms of one of the two licenses above.
# -----------------------------------------------------------------------------


"""
Closed vocabulary of v1 service accessors exposed on the client.

The untyped strategy uses these names to recognise client calls when no
type annotation tells it which variables hold a client.
"""

SERVICE_NAMES: frozenset[str] = frozenset(
    {
        "account_links",
        "account_sessions",
        "accounts",
        "apple_pay_domains",
        "application_fees",
        "apps",
        "balance",
        "balance_settings",
        "balance_transactions",
        "billing",
        "billing_portal",
        "capabilities",
        "charges",
        "checkout",
        "climate",
        "confirmation_tokens",
        "country_specs",
        "coupons",
        "credit_notes",
        "customer_sessions",
        "customers",
        "disputes",
        "entitlements",
        "ephemeral_keys",
        "events",
        "exchange_rates",
        "file_links",
        "files",
        "financial_connections",
        "forwarding",
        "identity",
        "invoice_items",
        "invoice_payments",
        "invoice_rendering_templates",
        "invoices",
        "issuing",
        "mandates",
        "payment_attempt_records",
        "payment_intents",
        "payment_links",
        "payment_method_configurations",
        "payment_method_domains",
        "payment_methods",
        "payment_records",
        "payouts",
        "plans",
        "prices",
        "products",
        "promotion_codes",
        "quotes",
        "radar",
        "refunds",
        "reporting",
        "reviews",
        "setup_attempts",
        "setup_intents",
        "shipping_rates",
        "sigma",
        "sources",
        "subscription_items",
        "subscription_schedules",
        "subscriptions",
        "tax",
        "tax_codes",
        "tax_ids",
        "tax_rates",
        "terminal",
        "test_helpers",
        "tokens",
        "topups",
        "transfers",
        "treasury",
        "webhook_endpoints",
    }
)
