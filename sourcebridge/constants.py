"""Package-wide constants and defaults."""

from __future__ import annotations

APP_NAME = "sourcebridge"

ENV_LOG_LEVEL = "SOURCEBRIDGE_LOG_LEVEL"

DEFAULT_LOG_LEVEL = "INFO"

# Property names of the encoded source bag.
SERIALIZED_SOURCE = "serialized_source"
OBJECT_TYPE_KEY = "@type"
SOURCE_FORMAT_TYPE = "sourcebridge.SerializedSourceFormat"

DEFAULT_DESIRED_BUNDLE_SIZE_BYTES = 64 * (1 << 20)

SPLIT_OUTCOME_SPLITTING_HAPPENED = "SOURCE_SPLIT_OUTCOME_SPLITTING_HAPPENED"
DERIVATION_MODE_INDEPENDENT = "SOURCE_DERIVATION_MODE_INDEPENDENT"

# Step translation.
PARALLEL_READ_STEP = "ParallelRead"
CUSTOM_SOURCE_FORMAT = "custom_source"
SOURCE_STEP_INPUT = "source_step_input"
FORMAT_PROPERTY = "format"
OUTPUT_PROPERTY = "output"
