from money_manager.calculator import CalculatorSession, TradingParameters
from money_manager.ledger import ledger_table
from money_manager.monitoring import LogNotifier, Monitor


params = TradingParameters(n_trades=7, loss_capture_pct=0.5, profit_capture_pct=0.8, leverage=50, fee_pct=0.12)
session = CalculatorSession(params=params, initial_amount=6500, monitor=Monitor(LogNotifier()))

coefficients = session.coefficients
print(f"divisor={coefficients.divisor:.4f} p={coefficients.p:.4f} q={coefficients.q:.4f}")

session.initialize()
session.record_win()
session.record_loss()
session.record_loss()
session.record_win()

for row in ledger_table(session.state.rows):
    print(row)

session.undo()
print("After undo:", session.state.rows[-1])
session.redo()
print("After redo:", session.state.rows[-1])

session.fast_forward(10)
print("Fast-forward to 10:", session.state.rows[-1])
print("Change:", session.change())
