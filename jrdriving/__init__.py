# JR Driving: convoy booking platform API
