"""Project version constants.

Used in the SDK user agent and the CLI ``--version`` output.
"""

ENGINE_NAME: str = "elbv2metrics"
ENGINE_VERSION: str = "0.1.0"
