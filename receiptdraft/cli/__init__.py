"""Unified command-line interface for receiptdraft.

Usage:
    receiptdraft scan <ocr.json>
    receiptdraft scan <ocr.json> --json --rules config/parser_rules.toml
    receiptdraft serve [--host] [--port]
"""
