"""Pull CustomResourceDefinition schemas from a cluster as JSON Schema files."""

__version__ = "0.1.0"
