"""InstantLog attendance history package.

Organized by feature modules (history, reports, notes, session, leave) with a
thin Flask controller layer over plain service/repository layers. All business
data comes from the attendance backend through api.client.
"""
