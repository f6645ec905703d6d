"""Package identity and artifact resolution"""
