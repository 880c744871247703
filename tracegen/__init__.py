"""Synthetic client traces for load-testing geo-distributed publish/subscribe brokers."""
