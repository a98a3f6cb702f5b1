"""Choice lists shared by auction and consignment screens."""

AUCTION_PLATFORMS = [
    ('liveauctioneers', 'LiveAuctioneers'),
    ('easylive', 'Easy Live Auction'),
    ('invaluable', 'Invaluable'),
    ('thesaleroom', 'The Saleroom'),
    ('bidsquare', 'BidSquare'),
    ('artsy', 'Artsy'),
    ('custom', 'Custom Platform'),
]

AUCTION_TYPES = [
    ('timed', 'Timed Auction'),
    ('live', 'Live Auction'),
    ('sealed_bid', 'Private Sale'),
]

AUCTION_SUBTYPES = [
    ('actual', 'Actual'),
    ('post_sale_platform', 'Post Sale (Platform)'),
    ('post_sale_private', 'Post Sale (Private)'),
    ('free_timed', 'Free Timed'),
]

AUCTION_STATUSES = [
    ('planned', 'Planned'),
    ('in_progress', 'In Progress'),
    ('ended', 'Ended'),
    ('aftersale', 'Aftersale'),
    ('archived', 'Archived'),
]

CONSIGNMENT_STATUSES = [
    ('active', 'Active'),
    ('pending', 'Pending'),
    ('completed', 'Completed'),
    ('cancelled', 'Cancelled'),
    ('archived', 'Archived'),
]

SORTING_MODES = [
    ('standard', 'Standard'),
    ('automatic', 'Automatic'),
    ('manual', 'Manual'),
]

ESTIMATES_VISIBILITY = [
    ('use_global', 'Use Global Setting'),
    ('show_always', 'Always Visible'),
    ('do_not_show', 'Always Hidden'),
]

TIME_ZONES = [
    ('UTC', 'UTC'),
    ('America/New_York', 'Eastern Time (ET)'),
    ('America/Chicago', 'Central Time (CT)'),
    ('America/Denver', 'Mountain Time (MT)'),
    ('America/Los_Angeles', 'Pacific Time (PT)'),
    ('Europe/London', 'Greenwich Mean Time (GMT)'),
    ('Europe/Paris', 'Central European Time (CET)'),
    ('Asia/Tokyo', 'Japan Standard Time (JST)'),
    ('Australia/Sydney', 'Australian Eastern Time (AET)'),
]

# Import/export template formats understood by the backend
ITEM_PLATFORMS = ['database', 'liveauctioneers', 'easy_live', 'invaluable', 'the_saleroom']

BRAND_CODES = ['MSABER', 'AURUM', 'METSAB']

SORT_DIRECTIONS = [('asc', 'Ascending'), ('desc', 'Descending')]


def choice_label(choices, value):
    """Label for a choice value, case-insensitive; unknown values are returned unchanged."""
    if value is None:
        return value
    lowered = str(value).lower()
    for key, label in choices:
        if key.lower() == lowered:
            return label
    return value
