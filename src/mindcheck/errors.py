"""Exception taxonomy for the wellness-check SDK.

Ordering and stage violations (answering the wrong question, calling an
operation in the wrong stage, unknown session) are programming errors and
raise plain ``ValueError``, the same way the session store does.  The
classes below cover the conditions a user can actually run into:

  - ValidationError: required registration fields are empty
  - AnalysisError: the classifier could not produce a result
      - ConfigurationError: no service credential is available
      - ServiceError: the call failed, returned nothing, or returned
        content that does not match the expected shape
"""


class MindcheckError(Exception):
    """Base class for all SDK errors."""


class ValidationError(MindcheckError):
    """User input failed a required-field check.  The message is user-facing."""


class AnalysisError(MindcheckError):
    """Generic "analysis failed" condition raised by a classifier."""


class ConfigurationError(AnalysisError):
    """The classifier credential is missing from the environment."""


class ServiceError(AnalysisError):
    """The remote classifier errored or returned unusable content."""
