"""Prometheus metrics for observability."""

from prometheus_client import Counter, Histogram, Gauge, Info

from app.config import Config

# Enrollment Metrics
enrollment_total = Counter(
    'roster_enrollment_total',
    'Total enrollment attempts',
    ['mode', 'status']  # mode: enroll, re_enroll; status: success, capture_failed, invalid
)

# Identification Metrics
identification_total = Counter(
    'roster_identification_total',
    'Total star-award identification attempts',
    ['outcome']  # matched, no_match, empty_roster, capture_failed
)

# Fingerprint Extraction Metrics
fingerprint_extraction_time = Histogram(
    'fingerprint_extraction_seconds',
    'Time to turn one audio clip into a fingerprint',
    buckets=[0.01, 0.05, 0.1, 0.2, 0.5, 1.0, 2.0]
)

# Roster Mutation Metrics
roster_mutations = Counter(
    'roster_mutations_total',
    'Committed roster mutations',
    ['kind']  # enroll, re_enroll, award, star_up, star_down, drop, reset_stars
)

undo_total = Counter(
    'roster_undo_total',
    'Undo requests',
    ['status']  # applied, empty
)

roster_size = Gauge(
    'roster_identities',
    'Number of enrolled identities'
)

history_depth = Gauge(
    'roster_history_snapshots',
    'Snapshots currently held for undo'
)

# System Info
app_info = Info('app', 'Application information')
app_info.info({
    'version': Config.APP_VERSION,
    'service': 'voice-star-roster',
    'features': 'enroll,knn_identify,undo'
})
