"""
Offline jobs for the harvest notifier.

- notify_report: send one serialized harvest / unwrap report

Reliability Level: Offline Job (Cold Path)
"""
