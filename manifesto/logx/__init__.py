"""Levelled, structured logging with console, JSON and CloudWatch output."""