"""JSON schemas for registry entries and for the published token list."""

from __future__ import annotations

from typing import Any

from .chain_registry import ChainId

ADDRESS_TYPE: dict[str, Any] = {
    'type': 'string',
    'minLength': 42,
    'maxLength': 42,
    'pattern': '^0x[a-fA-F0-9]{40}$'
}

TOKEN_SCHEMA: dict[str, Any] = {
    'type': 'object',
    'properties': {
        'address': ADDRESS_TYPE,
        'overrides': {
            'type': 'object',
            'properties': {
                'bridge': ADDRESS_TYPE,
                'name': {'type': 'string'},
                'symbol': {'type': 'string'},
                'decimals': {'type': 'integer'}
            },
            'additionalProperties': False
        }
    },
    'additionalProperties': False,
    'required': ['address']
}


def build_token_data_schema(chains: tuple[str, ...]) -> dict[str, Any]:
    return {
        'type': 'object',
        'properties': {
            'nonstandard': {'type': 'boolean'},
            'nobridge': {'type': 'boolean'},
            'name': {'type': 'string'},
            'symbol': {'type': 'string'},
            'decimals': {'type': 'integer'},
            'description': {
                'type': 'string',
                'minLength': 1,
                'maxLength': 1000
            },
            'website': {
                'type': 'string',
                'format': 'uri'
            },
            'twitter': {'type': 'string'},
            'tokens': {
                'type': 'object',
                'properties': {chain: TOKEN_SCHEMA for chain in chains},
                'additionalProperties': False,
                'anyOf': [{'required': [chain]} for chain in chains]
            }
        },
        'additionalProperties': False,
        'required': ['name', 'symbol', 'decimals', 'tokens']
    }


TOKEN_DATA_SCHEMA: dict[str, Any] = build_token_data_schema(tuple(chain.value for chain in ChainId))

EXPECTED_MISMATCHES_SCHEMA: dict[str, Any] = {
    'type': 'object',
    'properties': {
        'name': {'type': 'string'},
        'symbol': {'type': 'string'}
    }
}

# Uniswap token list format (draft-07), the structure the compiled list is published in.
_IDENTIFIER_PATTERN = '^[\\w]+$'

_EXTENSION_PRIMITIVE: dict[str, Any] = {
    'anyOf': [
        {'type': 'string', 'minLength': 1, 'maxLength': 42},
        {'type': 'boolean'},
        {'type': 'number'},
        {'type': 'null'}
    ]
}

TOKEN_LIST_SCHEMA: dict[str, Any] = {
    '$schema': 'http://json-schema.org/draft-07/schema#',
    '$id': 'https://uniswap.org/tokenlist.schema.json',
    'title': 'Uniswap Token List',
    'description': 'Schema for lists of tokens compatible with the Uniswap Interface',
    'definitions': {
        'Version': {
            'type': 'object',
            'properties': {
                'major': {'type': 'integer', 'minimum': 0},
                'minor': {'type': 'integer', 'minimum': 0},
                'patch': {'type': 'integer', 'minimum': 0}
            },
            'required': ['major', 'minor', 'patch'],
            'additionalProperties': False
        },
        'TagIdentifier': {
            'type': 'string',
            'minLength': 1,
            'maxLength': 10,
            'pattern': _IDENTIFIER_PATTERN
        },
        'ExtensionIdentifier': {
            'type': 'string',
            'minLength': 1,
            'maxLength': 40,
            'pattern': _IDENTIFIER_PATTERN
        },
        'ExtensionPrimitiveValue': _EXTENSION_PRIMITIVE,
        'ExtensionValueInner': {
            'anyOf': [
                {'$ref': '#/definitions/ExtensionPrimitiveValue'},
                {
                    'type': 'object',
                    'maxProperties': 10,
                    'propertyNames': {'$ref': '#/definitions/ExtensionIdentifier'},
                    'additionalProperties': {'$ref': '#/definitions/ExtensionPrimitiveValue'}
                }
            ]
        },
        'ExtensionValue': {
            'anyOf': [
                {'$ref': '#/definitions/ExtensionPrimitiveValue'},
                {
                    'type': 'object',
                    'maxProperties': 10,
                    'propertyNames': {'$ref': '#/definitions/ExtensionIdentifier'},
                    'additionalProperties': {'$ref': '#/definitions/ExtensionValueInner'}
                }
            ]
        },
        'ExtensionMap': {
            'type': 'object',
            'maxProperties': 10,
            'propertyNames': {'$ref': '#/definitions/ExtensionIdentifier'},
            'additionalProperties': {'$ref': '#/definitions/ExtensionValue'}
        },
        'TagDefinition': {
            'type': 'object',
            'properties': {
                'name': {
                    'type': 'string',
                    'minLength': 1,
                    'maxLength': 20,
                    'pattern': '^[ \\w]+$'
                },
                'description': {
                    'type': 'string',
                    'minLength': 1,
                    'maxLength': 200,
                    'pattern': '^[ \\w\\.,:]+$'
                }
            },
            'required': ['name', 'description'],
            'additionalProperties': False
        },
        'LogoURI': {
            'type': 'string',
            'format': 'uri'
        },
        'TokenInfo': {
            'type': 'object',
            'properties': {
                'chainId': {'type': 'integer', 'minimum': 1},
                'address': {'type': 'string', 'pattern': '^0x[a-fA-F0-9]{40}$'},
                'decimals': {'type': 'integer', 'minimum': 0, 'maximum': 255},
                'name': {
                    'type': 'string',
                    'minLength': 0,
                    'maxLength': 60,
                    'anyOf': [{'const': ''}, {'pattern': '^[ \\S+]+$'}]
                },
                'symbol': {
                    'type': 'string',
                    'minLength': 0,
                    'maxLength': 20,
                    'anyOf': [{'const': ''}, {'pattern': '^\\S+$'}]
                },
                'logoURI': {'$ref': '#/definitions/LogoURI'},
                'tags': {
                    'type': 'array',
                    'items': {'$ref': '#/definitions/TagIdentifier'},
                    'maxItems': 10
                },
                'extensions': {'$ref': '#/definitions/ExtensionMap'}
            },
            'required': ['chainId', 'address', 'decimals', 'name', 'symbol'],
            'additionalProperties': False
        }
    },
    'type': 'object',
    'properties': {
        'name': {
            'type': 'string',
            'minLength': 1,
            'maxLength': 30,
            'pattern': '^[\\w ]+$'
        },
        'timestamp': {
            'type': 'string',
            'format': 'date-time'
        },
        'version': {'$ref': '#/definitions/Version'},
        'tokens': {
            'type': 'array',
            'items': {'$ref': '#/definitions/TokenInfo'},
            'minItems': 0,
            'maxItems': 10000
        },
        'keywords': {
            'type': 'array',
            'items': {
                'type': 'string',
                'minLength': 1,
                'maxLength': 20,
                'pattern': '^[\\w ]+$'
            },
            'maxItems': 20,
            'uniqueItems': True
        },
        'tags': {
            'type': 'object',
            'maxProperties': 20,
            'propertyNames': {'$ref': '#/definitions/TagIdentifier'},
            'additionalProperties': {'$ref': '#/definitions/TagDefinition'}
        },
        'logoURI': {'$ref': '#/definitions/LogoURI'}
    },
    'required': ['name', 'timestamp', 'version', 'tokens'],
    'additionalProperties': False
}
