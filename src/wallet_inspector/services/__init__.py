# -*- coding: utf-8 -*-
"""Wallet inspection services."""
