"""
UhaiLink Emergency Notifier Service.

Turns an Emergency SOS trigger into SMS alerts for the user's emergency
contacts, delivered through Africa's Talking with Twilio as fallback,
and records a delivery audit row per recipient.
"""
