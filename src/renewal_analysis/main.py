"""
Main Analysis Pipeline
Project: Motor Insurance Renewal Analysis
Purpose: Run the complete renewal analysis, from spreadsheet to holdout metrics
"""

import sys
import warnings

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend; every figure is written to disk

from . import config
from .data_loader import DataLoader, DataLoadError
from .preprocessing import DataPreprocessor
from .eda_analysis import EDAAnalyzer
from .statistical_tests import StatisticalTester
from .data_split import random_split, stratified_split
from .modelling import ModelTrainer, ModelFitError
from .evaluation import ModelEvaluator


def run_model_branch(name, fit, score, test, evaluator):
    """
    Fit one model and score it on its holdout subset

    A degenerate training subset, or any failure while fitting or scoring,
    only skips this model; the caller carries on with the others.
    """
    try:
        model = fit()
    except ModelFitError as exc:
        print(f"[WARN] {name} skipped: {exc}")
        return None, None
    except Exception as e:
        print(f"[WARN] {name} skipped, fit failed: {e}")
        return None, None

    try:
        result = evaluator.evaluate(name, test[config.TARGET_COL], score(model, test))
        evaluator.plot_confusion_matrix(result)
    except Exception as e:
        print(f"[WARN] {name} skipped, evaluation failed: {e}")
        return None, None
    return model, result


def main(data_path=None, save_dir=config.PLOTS_DIR, rf_n_estimators=config.RF_N_ESTIMATORS,
         xgb_n_iter=config.XGB_N_ITER, cv_folds=config.CV_FOLDS,
         metrics_file=config.METRICS_SUMMARY_FILE):
    """
    Main function to run the complete analysis pipeline
    Returns:
        dict: Clean data, test summaries, fitted models and holdout results,
              or None when the spreadsheet could not be loaded
    """
    warnings.filterwarnings('ignore')
    print("Motor Insurance Renewal Analysis")
    print("=" * 60)

    # Step 1: Load the data
    print("\n1. Loading data...")
    loader = DataLoader()
    loader.list_data_files()
    try:
        data = loader.load_policy_data(data_path)
    except DataLoadError as exc:
        print(f"[ERROR] {exc}")
        return None

    loader.get_basic_info(data)
    loader.get_column_summary(data)
    loader.check_data_quality(data)

    # Step 2: Cleaning and recoding
    print("\n2. Data preprocessing...")
    preprocessor = DataPreprocessor()
    clean_data = preprocessor.clean(data)
    preprocessor.get_preprocessing_summary(data, clean_data)

    # Step 3: Descriptive analysis
    print("\n3. Exploratory Data Analysis...")
    eda = EDAAnalyzer(save_dir=save_dir)
    eda.basic_data_overview(clean_data)
    eda.skewness_report(clean_data)
    eda.plot_density_by_target(clean_data)
    eda.plot_categorical_by_target(clean_data)
    eda.plot_boxplots_by_target(clean_data)
    eda.group_means_by_target(clean_data)
    eda.renewal_rate_by_group(clean_data, 'grouped_change_in_price')
    eda.renewal_rate_by_group(clean_data, 'payment_method')

    tester = StatisticalTester()
    chi_square = tester.run_categorical_tests(clean_data)
    t_tests = tester.run_continuous_tests(clean_data)
    corr = tester.correlation_matrix(clean_data)
    eda.plot_correlation_heatmap(corr)

    # Step 4: Models
    print("\n4. Modelling...")
    trainer = ModelTrainer()
    evaluator = ModelEvaluator(save_dir=save_dir)
    models, results = {}, []

    train, test = random_split(clean_data)
    branches = [
        ("Logistic Regression",
         lambda: trainer.fit_logistic_regression(train),
         lambda model, rows: model.predict_proba(rows),
         test),
        ("Random Forest",
         lambda: trainer.fit_random_forest(train, n_estimators=rf_n_estimators),
         lambda model, rows: model.predict_proba(rows[trainer.features])[:, 1],
         test),
    ]

    strat_train, strat_test = stratified_split(clean_data)
    branches.append(
        ("Gradient Boosting",
         lambda: trainer.tune_gradient_boosting(strat_train, n_iter=xgb_n_iter, cv_folds=cv_folds),
         lambda model, rows: model.predict_proba(rows[trainer.features]),
         strat_test)
    )

    for name, fit, score, holdout in branches:
        model, result = run_model_branch(name, fit, score, holdout, evaluator)
        if result is not None:
            models[name] = model
            results.append(result)

    # Step 5: Summary
    print("\n5. Model Comparison")
    print("=" * 60)
    summary = evaluator.summary_table(results)
    if results:
        print(summary.round(4).to_string(index=False))
        evaluator.plot_roc_curves(results)
        label_rate = float((clean_data[config.TARGET_COL] == config.POSITIVE_LABEL).mean())
        extra = {}
        if "Gradient Boosting" in models:
            tuned = models["Gradient Boosting"]
            extra = {
                "Gradient boosting best params": str(tuned.best_params),
                "Gradient boosting CV AUC": f"{tuned.cv_auc:.4f}",
                "Gradient boosting apparent AUC": f"{tuned.apparent_auc:.4f}",
            }
        evaluator.write_metrics_summary(metrics_file, results, label_rate, extra)
    else:
        print("[WARN] No model could be fitted.")

    print(f"\nOriginal dataset: {data.shape[0]} rows -> after cleaning: {clean_data.shape[0]} rows")

    return {
        'clean_data': clean_data,
        'chi_square': chi_square,
        't_tests': t_tests,
        'correlation': corr,
        'models': models,
        'results': results,
        'summary': summary,
    }


if __name__ == "__main__":
    outcome = main()
    sys.exit(0 if outcome is not None else 1)
