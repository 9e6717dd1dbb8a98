"""Salon Studio package.

This package is organized by feature modules (appointments, clients, finance, ...)
with a thin Flask controller layer on top of service/repository layers backed by
Cloud Firestore.
"""
