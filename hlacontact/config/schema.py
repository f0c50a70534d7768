#!/usr/bin/env python3
"""
Configuration schema definition for validation
"""
from typing import Dict, Any, List


class ConfigSchema:
    """Configuration schema for validation"""

    SCHEMA = {
        'data': {
            'contacts': {'type': str, 'required': True},
            'sequences_a': {'type': str, 'required': True},
            'sequences_b': {'type': str, 'required': True},
            'entropy': {'type': str, 'required': False},
            'delimiter': {'type': str, 'required': False},
            'sequence_delimiter': {'type': str, 'required': False},
            'request_timeout': {'type': (int, float), 'required': False},
        },
        'analysis': {
            'locus': {'type': str, 'required': False},
            'distance_threshold': {'type': (int, float), 'required': False},
            'percentage_threshold': {'type': (int, float), 'required': False},
            'interaction_type': {'type': str, 'required': False},
            'allele1': {'type': str, 'required': False},
            'allele2': {'type': str, 'required': False},
            'show_polymorphic_only': {'type': bool, 'required': False},
            'entropy_threshold': {'type': (int, float), 'required': False},
            'min_score': {'type': (int, float), 'required': False},
            'integer_thresholds': {'type': bool, 'required': False},
        },
        'divergence': {
            'normalization_constant': {'type': (int, float), 'required': False},
            'scan_length': {'type': int, 'required': False},
            'max_position': {'type': int, 'required': False},
        },
        'cache': {
            'ttl_seconds': {'type': (int, float), 'required': False},
        },
        'logging': {
            'level': {'type': str, 'required': False},
            'format': {'type': str, 'required': False},
            'log_dir': {'type': str, 'required': False},
        },
    }

    @staticmethod
    def _type_name(expected) -> str:
        if isinstance(expected, tuple):
            return " or ".join(t.__name__ for t in expected)
        return expected.__name__

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> List[str]:
        """Validate configuration against schema

        Args:
            config: Configuration to validate

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        for section, fields in cls.SCHEMA.items():
            if any(props.get('required', False) for props in fields.values()):
                if section not in config:
                    errors.append(f"Missing required configuration section: {section}")
                    continue

            if section not in config:
                continue

            section_config = config[section]
            if not isinstance(section_config, dict):
                errors.append(f"Configuration section {section} must be a mapping")
                continue

            for field, props in fields.items():
                if props.get('required', False) and field not in section_config:
                    errors.append(f"Missing required configuration field: {section}.{field}")
                    continue

                if field not in section_config or 'type' not in props:
                    continue

                value = section_config[field]
                expected_type = props['type']
                # bool is an int subclass; only accept it where bool is expected
                if isinstance(value, bool) and expected_type is not bool:
                    valid = False
                else:
                    valid = isinstance(value, expected_type)
                if not valid:
                    errors.append(
                        f"Invalid type for {section}.{field}: expected {cls._type_name(expected_type)}, "
                        f"got {type(value).__name__}"
                    )

        return errors
