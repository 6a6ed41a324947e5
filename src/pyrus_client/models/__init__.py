"""Typed payloads of the Pyrus API.

Public names are re-exported from :mod:`pyrus_client`; this package stays
import-free because :mod:`pyrus_client.fields` depends on its entities.
"""
