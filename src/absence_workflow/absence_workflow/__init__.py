"""Absence Workflow package.

Members report absences against scheduled group sessions; approvers decide
them exactly once. Organized by feature modules (absences, groups, users,
audit) with a thin Flask controller layer over service/repository layers.
"""
