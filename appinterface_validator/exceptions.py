# Copyright 2025 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Custom exceptions for the AppInterface validator."""


class AppInterfaceValidatorError(Exception):
    """Base exception for validator related errors."""
    pass


class DocumentParseError(AppInterfaceValidatorError):
    """Exception raised when a YAML document cannot be parsed."""
    pass


class SchemaLoadError(AppInterfaceValidatorError):
    """Exception raised when a schema file cannot be read or parsed."""
    pass


class SchemaNotFoundError(AppInterfaceValidatorError):
    """Exception raised when a schema identifier is not registered."""

    def __init__(self, schema_id: str):
        super().__init__(f"Schema '{schema_id}' not found")
        self.schema_id = schema_id
