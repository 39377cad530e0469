# -*- coding: utf-8 -*-
"""Domain services: engagement counters, like toggles, media storage."""
