#!/usr/bin/env python3
"""
Example usage of the MDIO decoder
"""

from captures import SAMPLE_PERIOD, build_capture, read_frame, write_frame
from mdio import Decoder

def main():
    """Decode a synthetic write followed by a read"""

    print("🔧 MDIO Decoder Example")
    print("=" * 50)

    decoder = Decoder()
    decoder.reset()
    decoder.metadata('samplerate', round(1 / SAMPLE_PERIOD))  # 100 MHz

    # Write 0xABCD to PHY 3 register 7, then read it back. The read's data
    # bits are PHY-driven and only valid late in each MDC cycle.
    bits = write_frame(phy=3, reg=7) + read_frame(phy=3, reg=7)
    waveforms, edges = build_capture(bits, slave_from=64 + 46)
    print(f"✅ Built {len(waveforms['MDC'])} samples, {len(edges)} MDC cycles")

    print("\n📊 Decoded fields:")
    print("-" * 30)
    for ev in decoder.process(waveforms, {}):
        print(f"   {ev.start_sample:5d}-{ev.end_sample:5d} "
              f"{ev.category.name:<10} {ev.label}")

    print("\n🔧 Next Steps:")
    print("   1. Export a capture from your logic analyzer as VCD")
    print("   2. Run: mdio-decode capture.vcd --mdc <clock> --mdio <data>")

if __name__ == "__main__":
    main()
