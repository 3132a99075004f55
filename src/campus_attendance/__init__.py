"""Campus Attendance package.

University attendance management: QR-code check-in, absence justifications,
timetables, notifications and academic administration. Organized by feature
modules with a thin Flask controller layer over service/repository layers.
"""
