from primer_thermo.scripts.evaluate_primers import main

if __name__ == "__main__":
    raise SystemExit(main())
