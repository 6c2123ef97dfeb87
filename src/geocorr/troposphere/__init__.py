"""Tropospheric propagation models.

This implements corrections for the propagation delay of optical signals in
the electrically neutral atmosphere (mostly the troposphere and stratosphere).
"""
