"""InnovateFund backend package.

Hosts the REST API, the Socket.IO gateway and the notification fan-out
pipeline that connects innovators with investors.
"""
