"""
Kernel domain layer -- pure value objects, zero I/O.

Client snapshots, schedule rules, availability windows, booking records,
compliance issues, emitted events and the injectable Clock.
"""
