"""
Scheduling simulator package.

Computes the timeline and performance metrics of classic CPU scheduling
disciplines (Round Robin, SJN, priority, preemptive priority, SRT) for a
fixed batch of processes.
"""
