"""Exceptions raised by the stormharm pipelines."""


class MalformedInputError(Exception):
    """The storm data file cannot be read or lacks a required column.

    This is the only fatal error of the report: the pipeline stops and
    the operator sees the message.  Bad values *inside* a readable file
    (unparseable dates, unknown damage unit codes) never raise.
    """
