import argparse
import logging

from .analytics import conversion_curves, stage_table
from .models import DEFAULT_INPUTS, ReactionParameters
from .settings import settings
from .solver import run_multistage_calculation

logger = logging.getLogger(__name__)


def _add_parameter_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--Ha", type=float, default=DEFAULT_INPUTS["Ha"], help="Enthalpy of A (cal/mol)")
    p.add_argument("--Hb", type=float, default=DEFAULT_INPUTS["Hb"], help="Enthalpy of B (cal/mol)")
    p.add_argument("--Ca", type=float, default=DEFAULT_INPUTS["Ca"], help="Cp of A (cal/mol-K)")
    p.add_argument("--Cb", type=float, default=DEFAULT_INPUTS["Cb"], help="Cp of B (cal/mol-K)")
    p.add_argument("--Fa0", type=float, default=DEFAULT_INPUTS["Fa0"], help="Feed flow of A (mol/s)")
    p.add_argument("--Ke", type=float, default=DEFAULT_INPUTS["Ke"], help="Equilibrium constant at 298 K")
    p.add_argument("--T", type=float, default=DEFAULT_INPUTS["temperature"], help="Operating temperature (K)")
    p.add_argument("--T0", type=float, default=DEFAULT_INPUTS["T0"], help="Feed temperature (K)")
    p.add_argument("--Tcool", type=float, default=DEFAULT_INPUTS["cooling_temp"], help="Intercooling temperature (K)")
    p.add_argument("--target", type=float, default=DEFAULT_INPUTS["target_conversion"], help="Target conversion (0-1)")


def _build_parameters(args: argparse.Namespace) -> ReactionParameters:
    try:
        return ReactionParameters(
            Ha=args.Ha,
            Hb=args.Hb,
            Ca=args.Ca,
            Cb=args.Cb,
            Fa0=args.Fa0,
            Ke=args.Ke,
            temperature=args.T,
            T0=args.T0,
            cooling_temp=args.Tcool,
            target_conversion=args.target,
        )
    except ValueError as e:
        raise SystemExit(f"Error: {e}")


def run_cli(argv=None) -> None:
    parser = argparse.ArgumentParser(description="ReactorX - staged adiabatic reactor CLI")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_stages = sub.add_parser("stages", help="Number of intercooled adiabatic reactors to reach the target")
    _add_parameter_args(p_stages)
    p_stages.add_argument("--csv", type=str, default="stages.csv")

    p_curves = sub.add_parser("curves", help="Equilibrium and energy-balance conversion curves")
    _add_parameter_args(p_curves)
    p_curves.add_argument("--csv", type=str, default="curves.csv")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    params = _build_parameters(args)
    result = run_multistage_calculation(params)

    if args.cmd == "stages":
        stage_table(result, params).to_csv(args.csv, index=False)
        status = "reached" if result.target_reached else "not reached"
        print(
            f"Reactors required: {result.n_reactors}. Final conversion {result.final_conversion:.4f} "
            f"(target {params.target_conversion:.2f} {status})."
        )
        logger.info("Stage table written to %s", args.csv)
        return

    if args.cmd == "curves":
        conversion_curves(params, result.stages).to_csv(args.csv)
        logger.info("Curves written to %s", args.csv)
        return


if __name__ == "__main__":
    run_cli()
