"""Storage connector mapping XCP SRs and VDIs onto libvirt pools and volumes."""
