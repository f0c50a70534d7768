#!/usr/bin/env python3
"""
Default configuration values for the HLA contact pipeline
"""

DEFAULT_CONFIG = {
    'data': {
        'contacts': 'data/mhc_contacts.csv',
        'sequences_a': 'data/A.csv',
        'sequences_b': 'data/B.csv',
        'entropy': 'data/entropy.csv',
        'delimiter': ';',
        'sequence_delimiter': ',',
        'request_timeout': 30,
    },
    'analysis': {
        'locus': 'A',
        'distance_threshold': 3,
        'percentage_threshold': 20,
        'interaction_type': 'Peptide',
        'allele1': 'A*02:01',
        'allele2': 'A*03:01',
        'show_polymorphic_only': False,
        'entropy_threshold': 0.2,
        'min_score': 0.0,
        'integer_thresholds': False,
    },
    'divergence': {
        'scan_length': 182,
        'max_position': 341,
    },
    'cache': {
        'ttl_seconds': 3600,
    },
    'logging': {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    },
}
